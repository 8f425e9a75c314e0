"""Terraform CLI invocation."""
import json
import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from ..runlog import RunLogger


class TerraformError(Exception):
    """Raised when a terraform command exits non-zero."""

    def __init__(self, cmd: List[str], returncode: int, stderr: str):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr.strip()
        message = self.stderr or f"exit status {returncode}"
        super().__init__(f"'{' '.join(cmd[:2])}' failed: {message}")


class TerraformRunner:
    """Runs terraform commands in a working directory."""

    def __init__(self, working_dir: str, logger: RunLogger, binary: str = "terraform",
                 env: Optional[Dict[str, str]] = None):
        """Initialize the runner.

        Args:
            working_dir: Directory holding the Terraform configuration and state.
            logger: Run logger; command lines and output go to debug.
            binary: Name or path of the terraform executable.
            env: Extra environment variables for every command.
        """
        self.working_dir = working_dir
        self.logger = logger
        self.binary = binary
        self.env = env or {}

    def available(self) -> bool:
        return shutil.which(self.binary) is not None

    def _run(self, args: List[str]) -> str:
        cmd = [self.binary] + args
        self.logger.debug(f"Running command: {' '.join(cmd)}")

        result = subprocess.run(
            cmd,
            cwd=self.working_dir,
            capture_output=True,
            text=True,
            env={**os.environ, **self.env},
        )
        if result.stdout:
            self.logger.debug(result.stdout.strip())
        if result.returncode != 0:
            raise TerraformError(cmd, result.returncode, result.stderr or "")
        return result.stdout

    def init(self) -> None:
        self._run(["init", "-no-color", "-input=false"])

    def import_resource(self, address: str, resource_id: str) -> None:
        self._run(["import", "-no-color", "-input=false", address, resource_id])

    def show_state(self) -> Dict:
        """Return the state as parsed ``terraform show -json`` output."""
        if not Path(self.working_dir, "terraform.tfstate").exists():
            return {}
        return json.loads(self._run(["show", "-json", "-no-color"]) or "{}")
