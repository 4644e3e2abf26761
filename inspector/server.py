from __future__ import annotations
from typing import Any, Dict, List
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tutor_onboarding.config import configure_logging, load_settings
from tutor_onboarding.models.enums import Role

from .graph import build_branch_graph, build_role_graph, step_node_data
from .loader import load_store_local, reload_store_local

logger = logging.getLogger("inspector")


def create_app() -> FastAPI:
    app = FastAPI(title="Onboarding Catalog Inspector")

    # ------------------------------------------------------------------
    # Lookup errors from the catalog map onto HTTP status codes
    # ------------------------------------------------------------------
    @app.exception_handler(KeyError)
    async def key_error_handler(request: Request, exc: KeyError) -> JSONResponse:
        logger.info("Not found at %s: %s", request.url, exc)
        return JSONResponse(status_code=404, content={"ok": False, "error": str(exc.args[0]) if exc.args else "not found"})

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.warning("Bad request at %s: %s", request.url, exc)
        return JSONResponse(status_code=400, content={"ok": False, "error": str(exc)})

    @app.get("/api/roles")
    def list_roles() -> Dict[str, Any]:
        store = load_store_local()
        roles: List[Dict[str, Any]] = []
        for role, catalog in store.catalogs.items():
            roles.append({
                "role": role.value,
                "discriminator": catalog.discriminator_field,
                "paths": [
                    {
                        "id": value,
                        "label": catalog.discriminator_label(value),
                        "total_steps": catalog.total_steps(value),
                    }
                    for value in catalog.discriminator_values
                ],
            })
        return {"roles": roles}

    @app.get("/api/graph/{role}")
    def get_graph(role: str, path: str | None = None) -> Dict[str, Any]:
        catalog = load_store_local().catalog(Role(role))
        if path is None:
            return build_role_graph(catalog)
        return build_branch_graph(catalog, path)

    @app.get("/api/steps/{role}/{path}")
    def get_steps(role: str, path: str) -> Dict[str, Any]:
        catalog = load_store_local().catalog(Role(role))
        steps = catalog.branch_steps(path)
        return {
            "role": catalog.role.value,
            "path": path,
            "total_steps": catalog.total_steps(path),
            "field_keys": catalog.field_keys(path),
            "steps": [step_node_data(catalog.role.value, s) for s in steps],
        }

    @app.get("/api/version")
    def version() -> Dict[str, Any]:
        store = load_store_local()
        return {"version": store.version(), "ruleset_dir": str(store.base_dir)}

    @app.post("/api/reload")
    def reload() -> Dict[str, Any]:
        """Re-read the YAML tables from disk (after editing them)."""
        store = reload_store_local()
        logger.info("Catalog reloaded from %s", store.base_dir)
        return {"ok": True, "version": store.version()}

    return app


def cli() -> None:
    import uvicorn
    settings = load_settings()
    configure_logging(settings)
    uvicorn.run("inspector.server:app", host=settings.inspector_host, port=settings.inspector_port, reload=True)


# ASGI app export
app = create_app()
