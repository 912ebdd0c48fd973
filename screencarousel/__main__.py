"""
Package entry point, same commands as the `screencarousel` console script:

    python -m screencarousel check <page-url>        validate the feed, list slides
    python -m screencarousel play <page-url>         run the carousel in the terminal
    python -m screencarousel generate <host> <path>  pre-render a page, list assets
"""

from screencarousel.cli import main

if __name__ == "__main__":
    main()
