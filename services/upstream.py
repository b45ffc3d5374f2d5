"""HTTP dispatch to the upstream webhook."""

import httpx

from core.exceptions import UpstreamError
from core.request_types import PreparedRequest, UpstreamResponse


class UpstreamClient:
    """Send one prepared request and read its full body."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, prepared: PreparedRequest) -> UpstreamResponse:
        """Issue the upstream call.

        A failure while reading the body yields empty text; a failure of the
        call itself raises UpstreamError.
        """
        request = self._client.build_request(
            prepared.method,
            prepared.url,
            headers=prepared.headers,
            content=prepared.body.encode("utf-8") if prepared.body is not None else None,
        )
        try:
            response = await self._client.send(request, stream=True)
        except httpx.RequestError as e:
            raise UpstreamError(str(e) or type(e).__name__, url=prepared.url) from e

        try:
            text = await self._read_text(response)
        finally:
            await response.aclose()

        return UpstreamResponse(
            status_code=response.status_code,
            ok=response.is_success,
            text=text,
        )

    async def _read_text(self, response: httpx.Response) -> str:
        try:
            await response.aread()
        except httpx.HTTPError:
            return ""
        return response.text
