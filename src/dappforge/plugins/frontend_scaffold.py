"""Next.js Web3 application scaffold."""
from __future__ import annotations

import json
from typing import Any, Dict, List

from dappforge.core.blueprint.models import BlueprintNode
from dappforge.core.codegen.output import package_name
from dappforge.core.codegen.types import CodegenOutput, PathCategory
from dappforge.core.composition.paths import sanitize_scope
from dappforge.core.plugins.base import (
    BasePlugin,
    ExecutionContext,
    PluginDependency,
    PluginMetadata,
    PluginPort,
    load_config_schema,
)
from dappforge.core.utils.templates import render_template

TEMPLATE_DIR = "frontend-scaffold"


def build_package_json(config: Dict[str, Any]) -> str:
    dependencies = {
        "next": "^14.2.0",
        "react": "^18.3.0",
        "react-dom": "^18.3.0",
        "wagmi": "^2.12.0",
        "viem": "^2.21.0",
        "@tanstack/react-query": "^5.51.0",
        "@rainbow-me/rainbowkit": "^2.1.0",
        "clsx": "^2.1.0",
        "tailwind-merge": "^2.2.0",
    }
    dev_dependencies = {
        "@types/node": "^20.0.0",
        "@types/react": "^18.3.0",
        "@types/react-dom": "^18.3.0",
        "typescript": "^5.4.0",
        "eslint": "^8.57.0",
        "eslint-config-next": "^14.2.0",
    }
    if config["styling"] == "tailwind":
        dev_dependencies.update({"tailwindcss": "^3.4.0", "postcss": "^8.4.0", "autoprefixer": "^10.4.0"})

    manifest = {
        "name": package_name(config["appName"]),
        "version": "0.1.0",
        "private": True,
        "scripts": {
            "dev": "next dev",
            "build": "next build",
            "start": "next start",
            "lint": "next lint",
        },
        "dependencies": dependencies,
        "devDependencies": dev_dependencies,
    }
    return json.dumps(manifest, indent=2) + "\n"


def build_tsconfig(src_directory: bool) -> str:
    tsconfig = {
        "compilerOptions": {
            "target": "ES2020",
            "lib": ["dom", "dom.iterable", "ES2020"],
            "allowJs": True,
            "skipLibCheck": True,
            "strict": True,
            "noEmit": True,
            "esModuleInterop": True,
            "module": "esnext",
            "moduleResolution": "bundler",
            "resolveJsonModule": True,
            "isolatedModules": True,
            "jsx": "preserve",
            "incremental": True,
            "plugins": [{"name": "next"}],
            "paths": {"@/*": ["./src/*" if src_directory else "./*"]},
        },
        "include": ["next-env.d.ts", "**/*.ts", "**/*.tsx", ".next/types/**/*.ts"],
        "exclude": ["node_modules"],
    }
    return json.dumps(tsconfig, indent=2) + "\n"


class FrontendScaffoldPlugin(BasePlugin):
    metadata = PluginMetadata(
        id="frontend-scaffold",
        name="Frontend Scaffold",
        version="0.1.0",
        description="Next.js Web3 application with wagmi, viem and RainbowKit",
        category="app",
        tags=["nextjs", "web3", "wagmi", "rainbowkit", "frontend", "scaffold", "dapp"],
    )
    config_schema = load_config_schema("frontend-scaffold")
    ports: List[PluginPort] = [
        PluginPort(id="contract-in", name="Contract ABI", type="input", data_type="contract"),
        PluginPort(id="network-in", name="Network Config", type="input", data_type="config"),
        PluginPort(id="app-out", name="App Context", type="output", data_type="config"),
    ]
    dependencies: List[PluginDependency] = [
        PluginDependency(plugin_id="wallet-auth", required=False, data_mapping={"auth-out": "auth-config"}),
    ]

    def get_default_config(self) -> Dict[str, Any]:
        return {
            "framework": "nextjs",
            "styling": "tailwind",
            "srcDirectory": True,
            "appName": "My DApp",
        }

    def generate(self, node: BlueprintNode, context: ExecutionContext) -> CodegenOutput:
        config = self.resolved_config(node.config)
        paths = context.path_context
        project = context.config.project
        output = self.create_empty_output()

        values = {
            "app_name": config["appName"],
            "description": project.description or "A Web3 application",
            "styling": config["styling"],
            "strict_mode": True,
            "network": context.config.network,
            "lib_import": f"@/plugins/{sanitize_scope(node.id)}/lib",
            "frontend_path": paths.frontend_path,
            "frontend_root": paths.frontend_root,
            "src_directory": bool(paths.frontend_src_path),
            "content_root": "./src/" if paths.frontend_src_path else "./",
        }
        context.logger.info("Generating frontend scaffold %s for node %s", values["app_name"], node.id)

        # Project files at the app root already carry their final path.
        root = paths.frontend_path
        self.add_file(output, f"{root}/package.json", build_package_json(config))
        self.add_file(output, f"{root}/tsconfig.json", build_tsconfig(values["src_directory"]))
        self.add_file(output, f"{root}/next.config.js", render_template(f"{TEMPLATE_DIR}/next.config.js.j2", values))
        if config["styling"] == "tailwind":
            self.add_file(
                output,
                f"{root}/tailwind.config.js",
                render_template(f"{TEMPLATE_DIR}/tailwind.config.js.j2", values),
            )

        for name in ("layout.tsx", "page.tsx", "providers.tsx"):
            self.add_file(output, name, render_template(f"{TEMPLATE_DIR}/{name}.j2", values), PathCategory.FRONTEND_APP)
        for name in ("wagmi.ts", "chains.ts", "utils.ts"):
            self.add_file(output, name, render_template(f"{TEMPLATE_DIR}/{name}.j2", values), PathCategory.FRONTEND_LIB)
        self.add_file(
            output,
            "globals.css",
            render_template(f"{TEMPLATE_DIR}/globals.css.j2", values),
            PathCategory.FRONTEND_STYLES,
        )

        self.add_env_var(
            output,
            "NEXT_PUBLIC_APP_NAME",
            "Application name displayed in wallet dialogs",
            required=False,
            default_value=values["app_name"],
        )

        self.add_script(output, "dev", "next dev", "Start development server")
        self.add_script(output, "build", "next build", "Build for production")
        self.add_script(output, "start", "next start", "Start production server")
        self.add_script(output, "lint", "next lint", "Run ESLint")

        if context.config.generate_docs:
            self.add_doc(
                output,
                "docs/frontend/README.md",
                values["app_name"],
                render_template(f"{TEMPLATE_DIR}/README.md.j2", values),
            )

        context.logger.info("Generated frontend scaffold with %d files", len(output.files))
        return output


__all__ = ["FrontendScaffoldPlugin", "build_package_json", "build_tsconfig", "package_name"]
