"""Concrete implementation of the GroupClient interface over the IAM REST API.

Translates group operations into ``Operation`` values and delegates them to the
``RequestExecutor``, which owns retries, deadlines and error classification.
"""

import logging
from typing import Optional
from urllib.parse import quote

from iamcli.domain.interfaces.group_client import GroupClient
from iamcli.domain.models.group import GROUP_RESOURCE_TYPE, Group
from iamcli.domain.models.operation import Operation, OperationCategory
from iamcli.infrastructure.http.transport import HttpxTransport, Transport
from iamcli.infrastructure.monitoring.diagnostic_logger import DiagnosticLogger
from iamcli.infrastructure.resilience.backoff import DEFAULT_RETRY_CONFIG, RetryConfig
from iamcli.infrastructure.resilience.context import CallContext
from iamcli.infrastructure.resilience.timeout_governor import DEFAULT_TIMEOUT_CONFIG, TimeoutConfig
from .request_executor import RequestExecutor

logger = logging.getLogger(__name__)

GROUPS_PATH = "/groups"


class IamGroupClient(GroupClient):
    """IAM group client with retries, per-operation timeouts and typed errors."""

    def __init__(
        self,
        base_url: str,
        token: str,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
        timeout_config: TimeoutConfig = DEFAULT_TIMEOUT_CONFIG,
        diagnostics: Optional[DiagnosticLogger] = None,
        transport: Optional[Transport] = None,
    ):
        """Initializes the client.

        Args:
            base_url: IAM API endpoint (e.g. "https://iam-api.retailsvc.com").
            token: Bearer credential.
            retry_config: Retry policy for every operation.
            timeout_config: Per-category timeouts.
            diagnostics: Diagnostic logger for HTTP traffic.
            transport: Transport to use; an httpx-backed one is created if None.
        """
        if not base_url:
            raise ValueError("IAM API base URL not provided.")
        if not token:
            raise ValueError("IAM API token not provided.")
        self.transport = transport or HttpxTransport()
        self.executor = RequestExecutor(
            base_url,
            token,
            self.transport,
            retry_config=retry_config,
            timeout_config=timeout_config,
            diagnostics=diagnostics,
        )
        logger.info(f"IamGroupClient initialized for endpoint: {self.executor.base_url}")

    async def __aenter__(self) -> "IamGroupClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()

    @staticmethod
    def _group_path(group_id: str) -> str:
        return f"{GROUPS_PATH}/{quote(group_id, safe='')}"

    async def create_group(self, name: str, description: str, ctx: Optional[CallContext] = None) -> Group:
        operation = Operation(
            category=OperationCategory.CREATE,
            method="POST",
            path=GROUPS_PATH,
            body={"name": name, "description": description},
        )
        logger.debug(f"Creating group '{name}'")
        return await self.executor.execute(operation, decode=Group.from_dict, ctx=ctx)

    async def get_group(self, group_id: str, ctx: Optional[CallContext] = None) -> Group:
        operation = Operation(
            category=OperationCategory.READ,
            method="GET",
            path=self._group_path(group_id),
            resource_type=GROUP_RESOURCE_TYPE,
            resource_id=group_id,
        )
        return await self.executor.execute(operation, decode=Group.from_dict, ctx=ctx)

    async def update_group(
        self, group_id: str, name: str, description: str, ctx: Optional[CallContext] = None
    ) -> Group:
        operation = Operation(
            category=OperationCategory.UPDATE,
            method="PUT",
            path=self._group_path(group_id),
            body={"name": name, "description": description},
            resource_type=GROUP_RESOURCE_TYPE,
            resource_id=group_id,
        )
        logger.debug(f"Updating group {group_id}")
        return await self.executor.execute(operation, decode=Group.from_dict, ctx=ctx)

    async def delete_group(self, group_id: str, ctx: Optional[CallContext] = None) -> None:
        operation = Operation(
            category=OperationCategory.DELETE,
            method="DELETE",
            path=self._group_path(group_id),
            resource_type=GROUP_RESOURCE_TYPE,
            resource_id=group_id,
        )
        logger.debug(f"Deleting group {group_id}")
        await self.executor.execute(operation, ctx=ctx)
