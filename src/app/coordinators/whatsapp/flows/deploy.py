"""Deploy de Flows com detecção de mudança.

O hash canônico do Flow JSON de autoria é comparado ao último hash
implantado para `(waba_id, flow_name)`. Sem mudança, o upload é pulado:
deploys repetidos com o mesmo conteúdo são idempotentes e não consomem
rate limit da Graph API.

O cache é injetado (DeployHashStoreProtocol). A sequência ler-comparar-gravar
não é protegida por lock aqui; deploys concorrentes da mesma chave devem ser
serializados pelo chamador ou pelo store.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from app.flow_json import compute_flow_json_hash, to_wire_case

from .models import DeployResult, FlowAssetUpdateResult, FlowCreateResult, FlowPreview
from .validation import extract_validation_errors, normalize_validation_errors

if TYPE_CHECKING:
    from app.protocols.deploy_store import DeployHashStoreProtocol
    from app.protocols.http_client import GraphApiClientProtocol

logger = logging.getLogger(__name__)

DEFAULT_FLOW_CATEGORIES = ("OTHER",)
FLOW_ASSET_FILENAME = "flow.json"


class FlowDeployError(Exception):
    """Falha de deploy que não vem da Graph API (ex.: Flow ID não resolvido)."""


def _account_query(phone_number_id: str | None, business_account_id: str | None) -> dict[str, Any] | None:
    query: dict[str, Any] = {}
    if phone_number_id:
        query["phone_number_id"] = phone_number_id
    if business_account_id:
        query["business_account_id"] = business_account_id
    return query or None


class FlowDeployer:
    """Operações de Flow na Graph API (create, upload, publish, preview, deploy).

    Args:
        client: Transporte da Graph API
        hash_store: Cache de hashes de deploy
        strict_keys: Rejeita chaves snake/kebab no Flow JSON de autoria
    """

    def __init__(
        self,
        *,
        client: GraphApiClientProtocol,
        hash_store: DeployHashStoreProtocol,
        strict_keys: bool = True,
    ) -> None:
        self._client = client
        self._hash_store = hash_store
        self._strict_keys = strict_keys

    def _wire_json(self, flow_json: dict[str, Any]) -> str:
        return json.dumps(to_wire_case(flow_json, strict=self._strict_keys), ensure_ascii=False)

    async def create(
        self,
        *,
        waba_id: str,
        name: str,
        flow_json: dict[str, Any],
        categories: list[str] | None = None,
        endpoint_uri: str | None = None,
        publish: bool | None = None,
    ) -> FlowCreateResult:
        """Cria o Flow enviando o JSON já no formato wire."""
        body: dict[str, Any] = {
            "name": name,
            "categories": list(categories) if categories else list(DEFAULT_FLOW_CATEGORIES),
            "flow_json": self._wire_json(flow_json),
        }
        if publish is not None:
            body["publish"] = publish
        if endpoint_uri:
            body["endpoint_uri"] = endpoint_uri

        response = await self._client.request("POST", f"/{waba_id}/flows", json_body=body)
        flow_id = str(response.get("id") or "")
        logger.info("flow_created", extra={"flow_name": name, "flow_id": flow_id})
        return FlowCreateResult(
            flow_id=flow_id,
            success=bool(response.get("success", bool(flow_id))),
            validation_errors=normalize_validation_errors(extract_validation_errors(response)),
        )

    async def update_asset(
        self,
        *,
        flow_id: str,
        flow_json: dict[str, Any] | None = None,
        file: bytes | None = None,
        phone_number_id: str | None = None,
        business_account_id: str | None = None,
    ) -> FlowAssetUpdateResult:
        """Envia o asset FLOW_JSON (multipart).

        Args:
            flow_id: ID do Flow
            flow_json: Flow JSON de autoria (convertido para wire)
            file: Conteúdo pronto do flow.json (enviado como está)

        Raises:
            ValueError: Se nem `flow_json` nem `file` forem informados
        """
        if flow_json is not None:
            content = self._wire_json(flow_json).encode("utf-8")
        elif file is not None:
            content = bytes(file)
        else:
            raise ValueError("Informe flow_json ou file para atualizar o asset do Flow")

        response = await self._client.request(
            "POST",
            f"/{flow_id}/assets",
            form={"name": FLOW_ASSET_FILENAME, "asset_type": "FLOW_JSON"},
            files={"file": (FLOW_ASSET_FILENAME, content, "application/json")},
            query=_account_query(phone_number_id, business_account_id),
        )
        logger.info("flow_asset_uploaded", extra={"flow_id": flow_id, "size_bytes": len(content)})
        return FlowAssetUpdateResult(
            success=bool(response.get("success")),
            validation_errors=normalize_validation_errors(extract_validation_errors(response)),
        )

    async def publish(
        self,
        *,
        flow_id: str,
        phone_number_id: str | None = None,
        business_account_id: str | None = None,
    ) -> bool:
        """Publica o Flow."""
        response = await self._client.request(
            "POST",
            f"/{flow_id}/publish",
            query=_account_query(phone_number_id, business_account_id),
        )
        return bool(response.get("success"))

    async def deprecate(
        self,
        *,
        flow_id: str,
        phone_number_id: str | None = None,
        business_account_id: str | None = None,
    ) -> bool:
        """Deprecia o Flow."""
        response = await self._client.request(
            "POST",
            f"/{flow_id}/deprecate",
            query=_account_query(phone_number_id, business_account_id),
        )
        return bool(response.get("success"))

    async def preview(
        self,
        *,
        flow_id: str,
        interactive: bool = False,
        fields: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> FlowPreview:
        """Obtém a URL de preview (interactive invalida o preview anterior)."""
        query: dict[str, Any] = {
            "fields": fields or ("preview.invalidate(false)" if interactive else "preview")
        }
        if params:
            query.update(params)

        response = await self._client.request("GET", f"/{flow_id}", query=query)
        preview = response.get("preview")
        preview = preview if isinstance(preview, dict) else {}
        return FlowPreview(
            preview_url=str(preview.get("preview_url") or preview.get("previewUrl") or ""),
            expires_at=str(preview.get("expires_at") or preview.get("expiresAt") or ""),
        )

    async def get(self, *, flow_id: str, fields: str | None = None) -> dict[str, Any]:
        """Lê os dados de um Flow."""
        return await self._client.request(
            "GET", f"/{flow_id}", query={"fields": fields} if fields else None
        )

    async def list(
        self,
        *,
        waba_id: str,
        limit: int | None = None,
        after: str | None = None,
    ) -> dict[str, Any]:
        """Lista Flows da WABA (paginação por cursor `after`)."""
        query: dict[str, Any] = {}
        if limit is not None:
            query["limit"] = limit
        if after:
            query["after"] = after
        return await self._client.request("GET", f"/{waba_id}/flows", query=query or None)

    async def deploy(
        self,
        flow_json: dict[str, Any],
        *,
        name: str,
        waba_id: str,
        flow_id: str | None = None,
        endpoint_uri: str | None = None,
        categories: list[str] | None = None,
        publish: bool = False,
        preview: bool | dict[str, Any] = False,
        force_asset_upload: bool = False,
    ) -> DeployResult:
        """Cria ou atualiza o Flow, enviando o JSON só quando mudou.

        Sem `flow_id` o Flow é criado (a criação já envia o JSON). Com
        `flow_id`, o asset só é enviado se o cache não tiver hash para
        `(waba_id, name)`, se o hash diferir ou se `force_asset_upload`.

        Returns:
            DeployResult com `uploaded=False` quando o upload foi pulado

        Raises:
            FlowJsonCaseError: Chave snake/kebab no modo estrito
            FlowDeployError: Flow ID não resolvido após a criação
            GraphApiError: Erro da Graph API
        """
        flow_hash = compute_flow_json_hash(flow_json)
        validation_errors: tuple = ()
        uploaded = False

        if not flow_id:
            created = await self.create(
                waba_id=waba_id,
                name=name,
                flow_json=flow_json,
                categories=categories,
                endpoint_uri=endpoint_uri,
                publish=False,
            )
            if not created.flow_id:
                raise FlowDeployError("Unable to resolve Flow ID after deployment")
            flow_id = created.flow_id
            validation_errors = created.validation_errors
            uploaded = True
            await self._hash_store.set_hash(waba_id, name, flow_hash)
        else:
            last_hash = await self._hash_store.get_hash(waba_id, name)
            if last_hash is None or last_hash != flow_hash or force_asset_upload:
                update = await self.update_asset(flow_id=flow_id, flow_json=flow_json)
                validation_errors = update.validation_errors
                uploaded = True
                await self._hash_store.set_hash(waba_id, name, flow_hash)
            else:
                logger.info(
                    "flow_deploy_skipped",
                    extra={"flow_name": name, "flow_id": flow_id, "reason": "unchanged"},
                )

        if publish:
            await self.publish(flow_id=flow_id)

        preview_url: str | None = None
        if preview:
            options = preview if isinstance(preview, dict) else {"interactive": True}
            flow_preview = await self.preview(
                flow_id=flow_id,
                interactive=bool(options.get("interactive", False)),
                params=options.get("params"),
            )
            preview_url = flow_preview.preview_url or None

        return DeployResult(
            flow_id=flow_id,
            uploaded=uploaded,
            preview_url=preview_url,
            validation_errors=validation_errors,
        )
