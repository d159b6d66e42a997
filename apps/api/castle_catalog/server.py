import uvicorn

from castle_catalog.core.config import get_host, get_port


def main() -> None:
    host, port = get_host(), get_port()
    print(f"Castle Catalog starting on http://{host}:{port}")
    print(f"Docs available at: http://localhost:{port}/docs")
    print(f"GraphQL endpoint: http://localhost:{port}/graphql")
    uvicorn.run("castle_catalog.main:app", host=host, port=port)


if __name__ == "__main__":
    main()
