from pyreactive.boot import run_web
import components


if __name__ == "__main__":
    # e.g. http://127.0.0.1:8000/components/Pages/Home?title=pyreactive
    run_web([components])
