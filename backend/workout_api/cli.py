import argparse

from workout_api.main import create_app


def main() -> None:
    import uvicorn

    parser = argparse.ArgumentParser(description="Run the voice workout API server.")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to.")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to.")
    args = parser.parse_args()

    app = create_app()
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
