"Allow `python -m nextsemver`."

from .cli import entrypoint

if __name__ == "__main__":
    entrypoint()
