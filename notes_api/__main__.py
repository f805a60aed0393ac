"""Allow `python -m notes_api`."""

from notes_api.main import run

if __name__ == "__main__":
    run()
