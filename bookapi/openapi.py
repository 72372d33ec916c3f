"""
Book API — OpenAPI Document Generator
=====================================

What:  Turns the API specification declaration (api_spec.py) into an OpenAPI
       document, and checks the declaration against the routes registered on
       the FastAPI application.
How:   Component schemas come from Pydantic's JSON schema generator; paths,
       parameters, bodies and responses are assembled from the declaration.
When:  Once, inside create_app(), before the server accepts requests.

Generated document layout:
    {
        "openapi": "3.1.0",
        "info": {"title", "version", "description"},
        "tags": [{"name": "Book"}],
        "paths": {"/books/{id}": {"get": {...}}, "/books": {"post": {...}}},
        "components": {
            "schemas": {"Book": {...}},
            "securitySchemes": {"Bearer": {...}}
        }
    }

Security schemes are declared only. Nothing in the application checks the
Authorization header.
"""

import logging
import re
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Type, get_args, get_origin

from fastapi import FastAPI
from fastapi.routing import APIRoute, APIRouter
from pydantic import BaseModel, TypeAdapter
from pydantic.json_schema import models_json_schema

from bookapi.api_spec import ApiSpec, Operation
from bookapi.exceptions import ApiSpecError

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.1.0"
REF_TEMPLATE = "#/components/schemas/{model}"
JSON_MEDIA_TYPE = "application/json"

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

DEFAULT_SECURITY_SCHEMES: Dict[str, Dict[str, Any]] = {
    "Bearer": {"type": "apiKey", "name": "Authorization", "in": "header"},
}

# Matches "{id}" as well as Starlette's converter form "{id:int}"
_PATH_PARAM = re.compile(r"\{([^}:]+)(?::[^}]*)?\}")


# ══════════════════════════════════════════════════════════════════════════
# Shape Handling
# ══════════════════════════════════════════════════════════════════════════

def _unwrap_shape(shape: Any) -> Tuple[Type[BaseModel], bool]:
    """Split a declared shape into (model, is_list)."""
    is_list = get_origin(shape) is list
    if is_list:
        args = get_args(shape)
        model = args[0] if len(args) == 1 else None
    else:
        model = shape

    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        raise ApiSpecError(
            message=f"Unsupported shape {shape!r}: expected a Pydantic model or a list of one",
            context={"shape": repr(shape)},
        )
    return model, is_list


def _shape_schema(shape: Any, refs: Dict[Type[BaseModel], Dict[str, str]]) -> Dict[str, Any]:
    model, is_list = _unwrap_shape(shape)
    ref = dict(refs[model])
    if is_list:
        return {"type": "array", "items": ref}
    return ref


def _status_description(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Response"


def path_parameters(path: str) -> List[str]:
    """Names of the parameters in a path template, in order of appearance."""
    return _PATH_PARAM.findall(path)


def normalize_path(path: str) -> str:
    """Blank out parameter names so /books/{id} and /books/{book_id} compare equal."""
    return _PATH_PARAM.sub("{}", path)


# ══════════════════════════════════════════════════════════════════════════
# Declaration Validation
# ══════════════════════════════════════════════════════════════════════════

def _iter_operations(specs: Sequence[ApiSpec]):
    """Yield (spec, path, method, operation), validating as it goes."""
    seen = set()
    for spec in specs:
        for path, methods in spec.paths.items():
            if not path.startswith("/"):
                raise ApiSpecError(
                    message=f"Path '{path}' must start with '/'",
                    context={"path": path},
                )
            for method, operation in methods.items():
                method = method.lower()
                if method not in HTTP_METHODS:
                    raise ApiSpecError(
                        message=f"Unknown HTTP method '{method}' for path '{path}'",
                        context={"path": path, "method": method},
                    )
                key = (method, path)
                if key in seen:
                    raise ApiSpecError(
                        message=f"Operation {method.upper()} {path} is declared more than once",
                        context={"path": path, "method": method},
                    )
                seen.add(key)
                for code in operation.responses:
                    if not isinstance(code, int) or not 100 <= code <= 599:
                        raise ApiSpecError(
                            message=f"Invalid status code {code!r} for {method.upper()} {path}",
                            context={"path": path, "method": method, "status": code},
                        )
                yield spec, path, method, operation


def _collect_models(specs: Sequence[ApiSpec]) -> List[Type[BaseModel]]:
    models: List[Type[BaseModel]] = []
    for _, _, _, operation in _iter_operations(specs):
        shapes = list(operation.responses.values())
        if operation.body is not None:
            shapes.append(operation.body)
        for shape in shapes:
            model, _ = _unwrap_shape(shape)
            if model not in models:
                models.append(model)
    return models


# ══════════════════════════════════════════════════════════════════════════
# Document Assembly
# ══════════════════════════════════════════════════════════════════════════

def _operation_id(method: str, path: str, operation: Operation) -> str:
    if operation.handler is not None:
        return operation.handler.__name__
    slug = re.sub(r"[^0-9a-zA-Z]+", "_", path).strip("_")
    return f"{method}_{slug}" if slug else method


def _build_operation(
    spec: ApiSpec,
    path: str,
    method: str,
    operation: Operation,
    refs: Dict[Type[BaseModel], Dict[str, str]],
) -> Dict[str, Any]:
    result: Dict[str, Any] = {"tags": list(spec.tags)}
    if operation.summary:
        result["summary"] = operation.summary
    if operation.description:
        result["description"] = operation.description
    result["operationId"] = _operation_id(method, path, operation)

    parameters = [
        {
            "name": name,
            "in": "path",
            "required": True,
            "schema": TypeAdapter(operation.path_params.get(name, str)).json_schema(),
        }
        for name in path_parameters(path)
    ]
    if parameters:
        result["parameters"] = parameters

    if operation.body is not None:
        result["requestBody"] = {
            "required": True,
            "content": {JSON_MEDIA_TYPE: {"schema": _shape_schema(operation.body, refs)}},
        }

    result["responses"] = {
        str(code): {
            "description": _status_description(code),
            "content": {JSON_MEDIA_TYPE: {"schema": _shape_schema(shape, refs)}},
        }
        for code, shape in sorted(operation.responses.items())
    }
    return result


def build_openapi_document(
    specs: Sequence[ApiSpec],
    *,
    title: str,
    version: str,
    description: Optional[str] = None,
    security_schemes: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Build an OpenAPI document from API specification declarations.

    Args:
        specs:             Declarations to document
        title:             info.title
        version:           info.version
        description:       info.description
        security_schemes:  components.securitySchemes; defaults to the
                           Bearer header scheme

    Raises:
        ApiSpecError: If a declaration is malformed.
    """
    models = _collect_models(specs)
    schemas: Dict[str, Any] = {}
    refs: Dict[Type[BaseModel], Dict[str, str]] = {}
    if models:
        key_map, definitions = models_json_schema(
            [(model, "validation") for model in models],
            ref_template=REF_TEMPLATE,
        )
        schemas = definitions.get("$defs", {})
        refs = {model: key_map[(model, "validation")] for model in models}

    tags: List[str] = []
    paths: Dict[str, Dict[str, Any]] = {}
    for spec, path, method, operation in _iter_operations(specs):
        for tag in spec.tags:
            if tag not in tags:
                tags.append(tag)
        paths.setdefault(path, {})[method] = _build_operation(spec, path, method, operation, refs)

    info: Dict[str, Any] = {"title": title, "version": version}
    if description:
        info["description"] = description

    document = {
        "openapi": OPENAPI_VERSION,
        "info": info,
        "tags": [{"name": tag} for tag in tags],
        "paths": paths,
        "components": {
            "schemas": schemas,
            "securitySchemes": dict(
                DEFAULT_SECURITY_SCHEMES if security_schemes is None else security_schemes
            ),
        },
    }
    logger.debug("Built OpenAPI document with %d paths and %d schemas", len(paths), len(schemas))
    return document


# ══════════════════════════════════════════════════════════════════════════
# Route Consistency Check
# ══════════════════════════════════════════════════════════════════════════

DOCUMENTED_ONLY = "documented_only"
ROUTED_ONLY = "routed_only"


@dataclass(frozen=True)
class RouteMismatch:
    """A (method, path) pair present on only one side of the comparison."""
    method: str
    path: str
    kind: str

    def __str__(self) -> str:
        if self.kind == DOCUMENTED_ONLY:
            return f"{self.method} {self.path} is documented but has no registered route"
        return f"{self.method} {self.path} is routed but not documented"


def include_router(app: FastAPI, router: APIRouter, prefix: str = "") -> None:
    """
    Include router on app and record it for the route consistency check.

    Newer FastAPI releases keep included routers as wrapper entries in
    app.routes instead of copying their APIRoute objects onto the app, so
    the check reads the recorded routers directly.
    """
    app.include_router(router, prefix=prefix)
    included = getattr(app.state, "included_routers", None)
    if included is None:
        included = app.state.included_routers = []
    included.append((prefix, router))


def iter_api_routes(app: FastAPI) -> Iterator[Tuple[str, APIRoute]]:
    """
    Yield (full path, route) for every APIRoute reachable from app.

    Covers routes added directly on the app and routes of routers recorded
    by include_router(). A route seen both ways is yielded twice, which the
    comparison below tolerates.
    """
    for route in app.routes:
        if isinstance(route, APIRoute):
            yield route.path, route
    for prefix, router in getattr(app.state, "included_routers", ()):
        for route in router.routes:
            if isinstance(route, APIRoute):
                yield prefix + route.path, route


def find_route_mismatches(app: FastAPI, specs: Sequence[ApiSpec]) -> List[RouteMismatch]:
    """
    Compare declared operations with the app's routes.

    Only routes with include_in_schema=True take part; the greeting and the
    docs endpoints are registered with include_in_schema=False.
    """
    declared: Dict[Tuple[str, str], str] = {}
    for _, path, method, _ in _iter_operations(specs):
        declared[(method.upper(), normalize_path(path))] = path

    routed: Dict[Tuple[str, str], str] = {}
    for path, route in iter_api_routes(app):
        if not route.include_in_schema:
            continue
        for method in sorted(route.methods or ()):
            routed[(method, normalize_path(path))] = path

    mismatches = [
        RouteMismatch(method=key[0], path=path, kind=DOCUMENTED_ONLY)
        for key, path in declared.items()
        if key not in routed
    ]
    mismatches.extend(
        RouteMismatch(method=key[0], path=path, kind=ROUTED_ONLY)
        for key, path in routed.items()
        if key not in declared
    )
    return mismatches


def check_routes(app: FastAPI, specs: Sequence[ApiSpec], strict: bool = False) -> List[RouteMismatch]:
    """
    Report declaration/route mismatches.

    Logs one warning per mismatch, or raises ApiSpecError listing all of
    them when strict is True.
    """
    mismatches = find_route_mismatches(app, specs)
    if mismatches and strict:
        raise ApiSpecError(
            message="API specification does not match registered routes: "
            + "; ".join(str(m) for m in mismatches),
            context={"mismatches": [str(m) for m in mismatches]},
        )
    for mismatch in mismatches:
        logger.warning("API spec: %s", mismatch)
    return mismatches
