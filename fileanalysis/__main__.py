"""Entry point: python -m fileanalysis"""

from fileanalysis.main import main

if __name__ == "__main__":
    main()
