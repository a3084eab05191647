"""Wallet connection (RainbowKit / ConnectKit / Web3Modal)."""
from __future__ import annotations

from typing import Any, Dict, List

from dappforge.core.blueprint.models import BlueprintNode
from dappforge.core.codegen.types import CodegenOutput, PathCategory
from dappforge.core.composition.paths import sanitize_scope
from dappforge.core.plugins.base import BasePlugin, ExecutionContext, PluginMetadata, PluginPort, load_config_schema
from dappforge.core.utils.templates import render_template

TEMPLATE_DIR = "wallet-auth"


class WalletAuthPlugin(BasePlugin):
    metadata = PluginMetadata(
        id="wallet-auth",
        name="Wallet Authentication",
        version="0.1.0",
        description="Wallet connection with RainbowKit and WalletConnect",
        category="app",
        tags=["wallet", "authentication", "rainbowkit", "walletconnect", "web3"],
    )
    config_schema = load_config_schema("wallet-auth")
    ports: List[PluginPort] = [
        PluginPort(id="auth-out", name="Auth Context", type="output", data_type="config"),
    ]

    component_path = "packages/components/wallet-auth"
    component_package = "@cradle/wallet-auth"

    def get_default_config(self) -> Dict[str, Any]:
        return {
            "provider": "rainbowkit",
            "appName": "My DApp",
            "siweEnabled": False,
            "socialLogins": [],
            "sessionPersistence": True,
        }

    def generate(self, node: BlueprintNode, context: ExecutionContext) -> CodegenOutput:
        config = self.resolved_config(node.config)
        output = self.create_empty_output()
        values = {
            "provider": config["provider"],
            "app_name": config["appName"],
            "siwe_enabled": bool(config["siweEnabled"]),
            "social_logins": list(config["socialLogins"] or []),
            "session_persistence": bool(config["sessionPersistence"]),
            "types_import": f"@/plugins/{sanitize_scope(node.id)}/types",
        }

        self.add_file(
            output,
            "useWalletAuth.ts",
            render_template(f"{TEMPLATE_DIR}/useWalletAuth.ts.j2", values),
            PathCategory.FRONTEND_HOOKS,
        )
        self.add_file(output, "config.ts", render_template(f"{TEMPLATE_DIR}/config.ts.j2", values), PathCategory.FRONTEND_LIB)
        self.add_file(output, "types.ts", render_template(f"{TEMPLATE_DIR}/types.ts.j2", values), PathCategory.FRONTEND_TYPES)

        # WalletConnect is mandatory for RainbowKit only.
        self.add_env_var(
            output,
            "NEXT_PUBLIC_WALLETCONNECT_PROJECT_ID",
            "WalletConnect Cloud project ID",
            required=values["provider"] == "rainbowkit",
        )
        self.add_env_var(
            output,
            "NEXT_PUBLIC_APP_NAME",
            "Application name for wallet dialogs",
            required=False,
            default_value=values["app_name"],
        )
        self.add_script(
            output,
            "wallet:setup",
            'echo "Get your WalletConnect Project ID from https://dashboard.reown.com"',
            "Instructions for wallet setup",
        )
        if context.config.generate_docs:
            self.add_doc(
                output,
                "docs/wallet-auth/README.md",
                "Wallet Authentication",
                render_template(f"{TEMPLATE_DIR}/README.md.j2", values),
            )

        context.logger.info("Generated wallet authentication (%s) for node %s", values["provider"], node.id)
        return output


__all__ = ["WalletAuthPlugin"]
