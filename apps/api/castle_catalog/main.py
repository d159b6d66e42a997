from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from castle_catalog.core.config import get_app_version, is_fixture_hooks_enabled
from castle_catalog.core.observability import emit, install_observability
from castle_catalog.core.stores import Stores
from castle_catalog.modules.castles.router import router as castles_router
from castle_catalog.modules.fixtures.router import router as fixtures_router
from castle_catalog.modules.relations.router import router as relations_router
from castle_catalog.modules.rulers.gql import create_graphql_router


def create_app(stores: Optional[Stores] = None, fixture_hooks: Optional[bool] = None) -> FastAPI:
    app = FastAPI(title="Castle Catalog API", version=get_app_version())
    app.state.stores = stores if stores is not None else Stores.from_seed()

    install_observability(app)

    app.include_router(castles_router)
    app.include_router(relations_router)
    app.include_router(create_graphql_router(), prefix="/graphql")

    hooks = is_fixture_hooks_enabled() if fixture_hooks is None else fixture_hooks
    if hooks:
        app.include_router(fixtures_router)

    @app.get("/health")
    def health(request: Request):
        st: Stores = request.app.state.stores
        return {
            "status": "ok",
            "version": get_app_version(),
            "stores": {"castles": len(st.castles), "rulers": len(st.rulers)},
            "endpoints": {"graphql": "/graphql", "docs": "/docs", "openapi": "/openapi.json"},
            "fixture_hooks": hooks,
        }

    @app.get("/", include_in_schema=False)
    def root():
        return RedirectResponse(url="/docs")

    emit(
        "info",
        "app.created",
        "castle catalog ready",
        None,
        __name__,
        castles=len(app.state.stores.castles),
        rulers=len(app.state.stores.rulers),
        fixture_hooks=hooks,
    )
    return app


app = create_app()
