from typing import Sequence

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from corsgate.cors.policy import PolicyEngine


class OriginPolicyCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose origin check is delegated to the shared PolicyEngine."""

    def __init__(
        self,
        app: ASGIApp,
        engine: PolicyEngine,
        allow_methods: Sequence[str] = ("GET",),
        allow_headers: Sequence[str] = (),
        allow_credentials: bool = False,
        expose_headers: Sequence[str] = (),
        max_age: int = 600,
        preflight_status: int = 200,
    ) -> None:
        # No static origins: every origin goes through is_allowed_origin
        super().__init__(
            app,
            allow_origins=(),
            allow_methods=allow_methods,
            allow_headers=allow_headers,
            allow_credentials=allow_credentials,
            expose_headers=expose_headers,
            max_age=max_age,
        )
        self.engine = engine
        self.preflight_status = preflight_status

    def is_allowed_origin(self, origin: str) -> bool:
        return self.engine.is_allowed(origin)

    def preflight_response(self, request_headers: Headers) -> Response:
        resp = super().preflight_response(request_headers=request_headers)
        if resp.status_code != 200 or self.preflight_status == 200:
            return resp
        headers = {
            k: v for k, v in resp.headers.items()
            if k not in ("content-length", "content-type")
        }
        return Response(status_code=self.preflight_status, headers=headers)
