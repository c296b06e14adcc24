"""Shared test fixtures and factories."""

from pathlib import Path
from typing import Any

import pytest

from ggmcp.config.models import GgmcpConfig, ProjectConfig
from ggmcp.config.paths import get_ggmcp_home
from ggmcp.rpc.handler import ProtocolHandler
from ggmcp.tools.base import Tool, ToolResult
from ggmcp.tools.executor import ToolExecutor
from ggmcp.tools.registry import ToolRegistry


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point GGMCP_HOME at a temp dir and drop env overrides."""
    monkeypatch.setenv("GGMCP_HOME", str(tmp_path / "ggmcp-home"))
    for var in ("GGMCP_PORT", "GGMCP_DEBUG", "GGMCP_PROJECT_ROOT", "GGMCP_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    get_ggmcp_home.cache_clear()
    yield
    get_ggmcp_home.cache_clear()


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def config_toml_content() -> str:
    """Valid TOML config content."""
    return """
[server]
host = "127.0.0.1"
probe_timeout = 0.5
allowed_origins = ["http://localhost:*"]

[server.port_range]
start = 9960
end = 9970

[logging]
debug = true
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml_content: str) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_toml_content)
    return config_path


# =============================================================================
# Project Fixtures
# =============================================================================


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A small project tree used by the file tools."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "node_modules" / "dep").mkdir(parents=True)
    (root / "package.json").write_text('{"name": "demo"}\n')
    (root / "README.md").write_text("# Demo\n\nA demo project.\n")
    (root / "src" / "main.ts").write_text("export const answer = 42;\n")
    (root / "src" / "util.ts").write_text("export function helper() {}\n")
    (root / "docs" / "guide.md").write_text("The answer is 42.\n")
    (root / "node_modules" / "dep" / "index.js").write_text("answer = 42\n")
    return root


@pytest.fixture
def app_config(project_dir: Path) -> GgmcpConfig:
    return GgmcpConfig(project=ProjectConfig(root=project_dir))


# =============================================================================
# Tool Fixtures
# =============================================================================


class MockTool(Tool):
    """Mock tool for testing."""

    def __init__(
        self,
        name: str = "mock_tool",
        description: str = "A mock tool for testing",
        result: ToolResult | None = None,
        raises: Exception | None = None,
        required: list[str] | None = None,
    ):
        self._name = name
        self._description = description
        self._result = result or ToolResult.success("Mock tool executed")
        self._raises = raises
        self._required = required or []
        self.calls: list[dict[str, Any]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"input": {"type": "string"}},
            "required": self._required,
        }

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        self.calls.append(arguments)
        if self._raises is not None:
            raise self._raises
        return self._result


@pytest.fixture
def mock_tool() -> MockTool:
    return MockTool()


@pytest.fixture
def failing_tool() -> MockTool:
    return MockTool(
        name="failing_tool",
        description="A tool that always reports failure",
        result=ToolResult.error("Tool failed"),
    )


@pytest.fixture
def raising_tool() -> MockTool:
    return MockTool(
        name="raising_tool",
        description="A tool that raises",
        raises=RuntimeError("boom"),
    )


@pytest.fixture
def tool_registry(
    mock_tool: MockTool, failing_tool: MockTool, raising_tool: MockTool
) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(mock_tool)
    registry.register(failing_tool)
    registry.register(raising_tool)
    return registry


@pytest.fixture
def executor(tool_registry: ToolRegistry) -> ToolExecutor:
    return ToolExecutor(tool_registry)


@pytest.fixture
def handler(executor: ToolExecutor, project_dir: Path) -> ProtocolHandler:
    return ProtocolHandler(executor, project_dir)


@pytest.fixture
def cli_runner():
    """CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})


@pytest.fixture
def restore_root_logger():
    """Undo configure_logging() side effects on the root and uvicorn loggers."""
    import logging

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    for name in ("uvicorn", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers = []
        uv_logger.propagate = True
