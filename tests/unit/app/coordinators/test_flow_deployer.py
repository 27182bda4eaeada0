"""Testes do FlowDeployer (deploy idempotente e operações da Graph API)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from app.coordinators.whatsapp.flows.deploy import FlowDeployer, FlowDeployError
from app.flow_json import FlowJsonCaseError, compute_flow_json_hash
from app.infra.stores import MemoryDeployHashStore

FLOW_JSON = {
    "version": "7.2",
    "dataApiVersion": "3.0",
    "screens": [{"id": "WELCOME", "terminal": True, "layout": {"type": "SingleColumnLayout", "children": []}}],
}


@dataclass
class FakeGraphClient:
    """Fake do GraphApiClientProtocol que registra as chamadas."""

    responses: dict[tuple[str, str], dict[str, Any]] = field(default_factory=dict)
    calls: list[dict[str, Any]] = field(default_factory=list)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        form: dict[str, Any] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
        query: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        self.calls.append(
            {
                "method": method,
                "path": path,
                "json_body": json_body,
                "form": form,
                "files": files,
                "query": query,
            }
        )
        return self.responses.get((method, path), {"success": True})

    def paths(self) -> list[tuple[str, str]]:
        return [(call["method"], call["path"]) for call in self.calls]


def _deployer(client: FakeGraphClient, store: MemoryDeployHashStore | None = None) -> FlowDeployer:
    return FlowDeployer(client=client, hash_store=store or MemoryDeployHashStore())


class TestDeployChangeDetection:
    """Upload só acontece quando o Flow JSON muda."""

    @pytest.mark.asyncio
    async def test_second_identical_deploy_skips_upload(self) -> None:
        """Dois deploys iguais seguidos: exatamente um upload."""
        client = FakeGraphClient()
        deployer = _deployer(client)

        first = await deployer.deploy(FLOW_JSON, name="signup", waba_id="waba-1", flow_id="flow-9")
        second = await deployer.deploy(FLOW_JSON, name="signup", waba_id="waba-1", flow_id="flow-9")

        assert first.uploaded is True
        assert second.uploaded is False
        assert client.paths() == [("POST", "/flow-9/assets")]

    @pytest.mark.asyncio
    async def test_key_order_does_not_trigger_upload(self) -> None:
        client = FakeGraphClient()
        store = MemoryDeployHashStore({("waba-1", "signup"): compute_flow_json_hash(FLOW_JSON)})
        reordered = dict(reversed(list(FLOW_JSON.items())))

        result = await _deployer(client, store).deploy(
            reordered, name="signup", waba_id="waba-1", flow_id="flow-9"
        )

        assert result.uploaded is False
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_changed_json_uploads_and_updates_hash(self) -> None:
        client = FakeGraphClient()
        store = MemoryDeployHashStore({("waba-1", "signup"): "stale"})
        changed = {**FLOW_JSON, "version": "7.3"}

        result = await _deployer(client, store).deploy(
            changed, name="signup", waba_id="waba-1", flow_id="flow-9"
        )

        assert result.uploaded is True
        assert await store.get_hash("waba-1", "signup") == compute_flow_json_hash(changed)

    @pytest.mark.asyncio
    async def test_force_upload_ignores_cache(self) -> None:
        client = FakeGraphClient()
        store = MemoryDeployHashStore({("waba-1", "signup"): compute_flow_json_hash(FLOW_JSON)})

        result = await _deployer(client, store).deploy(
            FLOW_JSON, name="signup", waba_id="waba-1", flow_id="flow-9", force_asset_upload=True
        )

        assert result.uploaded is True
        assert client.paths() == [("POST", "/flow-9/assets")]

    @pytest.mark.asyncio
    async def test_cache_is_per_account_and_name(self) -> None:
        client = FakeGraphClient()
        store = MemoryDeployHashStore({("waba-1", "signup"): compute_flow_json_hash(FLOW_JSON)})

        result = await _deployer(client, store).deploy(
            FLOW_JSON, name="signup", waba_id="waba-2", flow_id="flow-9"
        )

        assert result.uploaded is True

    @pytest.mark.asyncio
    async def test_without_flow_id_creates_flow(self) -> None:
        client = FakeGraphClient(responses={("POST", "/waba-1/flows"): {"id": "new-flow", "success": True}})
        store = MemoryDeployHashStore()

        result = await _deployer(client, store).deploy(FLOW_JSON, name="signup", waba_id="waba-1")

        assert result.flow_id == "new-flow"
        assert result.uploaded is True
        assert client.paths() == [("POST", "/waba-1/flows")]
        assert await store.get_hash("waba-1", "signup") == compute_flow_json_hash(FLOW_JSON)

    @pytest.mark.asyncio
    async def test_create_without_id_raises(self) -> None:
        client = FakeGraphClient(responses={("POST", "/waba-1/flows"): {"success": False}})

        with pytest.raises(FlowDeployError):
            await _deployer(client).deploy(FLOW_JSON, name="signup", waba_id="waba-1")

    @pytest.mark.asyncio
    async def test_strict_mode_rejects_before_any_call(self) -> None:
        client = FakeGraphClient()

        with pytest.raises(FlowJsonCaseError):
            await _deployer(client).deploy(
                {"data_api_version": "3.0"}, name="signup", waba_id="waba-1", flow_id="flow-9"
            )

        assert client.calls == []

    @pytest.mark.asyncio
    async def test_publish_and_preview(self) -> None:
        client = FakeGraphClient(
            responses={
                ("GET", "/flow-9"): {
                    "preview": {"preview_url": "https://preview/x", "expires_at": "2026-01-01"}
                }
            }
        )

        result = await _deployer(client).deploy(
            FLOW_JSON, name="signup", waba_id="waba-1", flow_id="flow-9", publish=True, preview=True
        )

        assert result.preview_url == "https://preview/x"
        assert client.paths() == [
            ("POST", "/flow-9/assets"),
            ("POST", "/flow-9/publish"),
            ("GET", "/flow-9"),
        ]
        assert client.calls[-1]["query"] == {"fields": "preview.invalidate(false)"}

    @pytest.mark.asyncio
    async def test_validation_errors_are_normalized(self) -> None:
        client = FakeGraphClient(
            responses={
                ("POST", "/flow-9/assets"): {
                    "success": True,
                    "validation_errors": [
                        {
                            "error": "INVALID_PROPERTY",
                            "error_type": "FLOW_JSON_ERROR",
                            "message": "Invalid property",
                            "line_start": 10,
                            "pointers": [{"path": "screens[0].layout.children[0].data-source", "line_start": 10}],
                        }
                    ],
                }
            }
        )

        result = await _deployer(client).deploy(FLOW_JSON, name="signup", waba_id="waba-1", flow_id="flow-9")

        (error,) = result.validation_errors
        assert error.error == "INVALID_PROPERTY"
        assert error.error_type == "FLOW_JSON_ERROR"
        assert error.extra == {"lineStart": 10}
        assert error.pointers[0].extra == {"lineStart": 10}
        assert error.hint == "Use dataSource (camelCase). We map it to data-source."


class TestFlowOperations:
    """Operações individuais sobre a Graph API."""

    @pytest.mark.asyncio
    async def test_create_sends_wire_json(self) -> None:
        client = FakeGraphClient(responses={("POST", "/waba-1/flows"): {"id": "f1"}})

        result = await _deployer(client).create(
            waba_id="waba-1", name="signup", flow_json=FLOW_JSON, endpoint_uri="https://x/flow"
        )

        body = client.calls[0]["json_body"]
        assert result.flow_id == "f1"
        assert result.success is True
        assert body["categories"] == ["OTHER"]
        assert body["endpoint_uri"] == "https://x/flow"
        assert json.loads(body["flow_json"])["data_api_version"] == "3.0"

    @pytest.mark.asyncio
    async def test_update_asset_multipart(self) -> None:
        client = FakeGraphClient()

        await _deployer(client).update_asset(
            flow_id="flow-9", flow_json=FLOW_JSON, phone_number_id="pn-1"
        )

        call = client.calls[0]
        filename, content, content_type = call["files"]["file"]
        assert filename == "flow.json"
        assert content_type == "application/json"
        assert json.loads(content)["data_api_version"] == "3.0"
        assert call["form"] == {"name": "flow.json", "asset_type": "FLOW_JSON"}
        assert call["query"] == {"phone_number_id": "pn-1"}

    @pytest.mark.asyncio
    async def test_update_asset_requires_content(self) -> None:
        with pytest.raises(ValueError):
            await _deployer(FakeGraphClient()).update_asset(flow_id="flow-9")

    @pytest.mark.asyncio
    async def test_update_asset_raw_file_sent_as_is(self) -> None:
        client = FakeGraphClient()

        await _deployer(client).update_asset(flow_id="flow-9", file=b'{"version":"7.2"}')

        assert client.calls[0]["files"]["file"][1] == b'{"version":"7.2"}'
        assert client.calls[0]["query"] is None

    @pytest.mark.asyncio
    async def test_deprecate(self) -> None:
        client = FakeGraphClient()
        assert await _deployer(client).deprecate(flow_id="flow-9") is True
        assert client.paths() == [("POST", "/flow-9/deprecate")]

    @pytest.mark.asyncio
    async def test_preview_default_fields(self) -> None:
        client = FakeGraphClient(responses={("GET", "/flow-9"): {"preview": {"preview_url": "u"}}})

        preview = await _deployer(client).preview(flow_id="flow-9")

        assert preview.preview_url == "u"
        assert preview.expires_at == ""
        assert client.calls[0]["query"] == {"fields": "preview"}

    @pytest.mark.asyncio
    async def test_list_with_pagination(self) -> None:
        client = FakeGraphClient(responses={("GET", "/waba-1/flows"): {"data": []}})

        result = await _deployer(client).list(waba_id="waba-1", limit=5, after="cursor")

        assert result == {"data": []}
        assert client.calls[0]["query"] == {"limit": 5, "after": "cursor"}
