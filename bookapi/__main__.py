"""Entry point for `python -m bookapi`."""

from bookapi.main import serve

if __name__ == "__main__":
    serve()
