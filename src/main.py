"""Entry point for the gem cascade match-three game."""
from gemcascade.window import main

if __name__ == "__main__":
    main()
