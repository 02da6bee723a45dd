"""doiuse engine running in a node subprocess."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Collection, Sequence
from typing import Any

from doiuse_ls.engine.base import ScanEngine
from doiuse_ls.engine.locate import EngineLocation
from doiuse_ls.errors import EngineError, ScanParseFailure
from doiuse_ls.validator.models import FeatureFinding, SourcePosition
from doiuse_ls.validator.syntax import Syntax

logger = logging.getLogger(__name__)

PARSE_ERROR_NAMES = {"CssSyntaxError"}

# Reads one JSON request on stdin and writes one JSON reply on stdout.
BRIDGE_SCRIPT = r"""
const path = require('path');
const { createRequire } = require('module');

function reply(payload) {
  process.stdout.write(JSON.stringify(payload));
}

function fail(err) {
  reply({ error: { name: (err && err.name) || 'Error', message: String((err && err.message) || err) } });
}

let input = '';
process.stdin.setEncoding('utf8');
process.stdin.on('data', (chunk) => { input += chunk; });
process.stdin.on('end', () => {
  try {
    const req = JSON.parse(input);
    const fromEngine = createRequire(path.join(req.module, 'package.json'));
    const fromWorkspace = createRequire(path.join(req.workspace || process.cwd(), 'index.js'));
    const load = (name) => {
      try {
        return fromEngine(name);
      } catch (err) {
        return fromWorkspace(name);
      }
    };

    const doiuse = require(req.module);
    const postcss = load('postcss');
    const findings = [];
    const plugin = doiuse({
      browsers: req.browsers,
      ignore: req.ignore,
      onFeatureUsage: (info) => {
        const source = (info.usage && info.usage.source) || {};
        const start = source.start || { line: 1, column: 1 };
        const end = source.end || start;
        const data = info.featureData || {};
        findings.push({
          feature: info.feature,
          message: info.message || '',
          missing: Boolean(data.missing),
          partial: Boolean(data.partial),
          start: { line: start.line, column: start.column },
          end: { line: end.line, column: end.column }
        });
      }
    });

    const options = { from: undefined };
    if (req.syntax) {
      options.syntax = load(req.syntax);
    }
    postcss([plugin]).process(req.css, options).then(() => reply({ findings }), fail);
  } catch (err) {
    fail(err);
  }
});
"""


def _finding(raw: dict[str, Any]) -> FeatureFinding:
    start = raw.get("start") or {}
    end = raw.get("end") or start
    return FeatureFinding(
        feature_id=str(raw.get("feature", "")),
        missing=bool(raw.get("missing")),
        partial=bool(raw.get("partial")),
        message=str(raw.get("message", "")),
        position=SourcePosition(
            start_line=int(start.get("line", 1)),
            start_column=int(start.get("column", 1)),
            end_line=int(end.get("line", start.get("line", 1))),
            end_column=int(end.get("column", start.get("column", 1))),
        ),
    )


def parse_reply(stdout: bytes, stderr: bytes = b"", returncode: int | None = 0) -> list[FeatureFinding]:
    """Turn the bridge output into findings, or raise the matching error."""
    try:
        data = json.loads(stdout.decode("utf-8"))
    except ValueError:
        detail = stderr.decode("utf-8", errors="replace").strip()[-500:]
        raise EngineError(
            f"doiuse bridge exited with code {returncode}: {detail or 'no output'}"
        )

    if not isinstance(data, dict):
        raise EngineError(f"Unexpected doiuse bridge reply: {data!r}")

    error = data.get("error")
    if error:
        name = error.get("name", "Error")
        message = error.get("message", "unknown error")
        if name in PARSE_ERROR_NAMES:
            raise ScanParseFailure(message)
        raise EngineError(f"{name}: {message}")

    return [_finding(item) for item in data.get("findings", []) if isinstance(item, dict)]


class NodeDoiuseEngine(ScanEngine):
    """Runs postcss + doiuse once per scan through ``node -e``."""

    def __init__(self, location: EngineLocation, workspace_root: str | None = None) -> None:
        self._location = location
        self._workspace_root = workspace_root

    @property
    def location(self) -> EngineLocation:
        return self._location

    async def scan(
        self,
        text: str,
        browsers: Sequence[str],
        ignore: Collection[str] = (),
        syntax: Syntax | None = None,
    ) -> list[FeatureFinding]:
        request = {
            "module": str(self._location.module_dir),
            "workspace": self._workspace_root,
            "css": text,
            "browsers": list(browsers),
            "ignore": sorted(ignore),
            "syntax": syntax.value if syntax else None,
        }

        logger.debug(
            "doiuse scan: browsers=%s, syntax=%s, len=%d",
            request["browsers"],
            request["syntax"],
            len(text),
        )

        proc = await asyncio.create_subprocess_exec(
            self._location.node, "-e", BRIDGE_SCRIPT,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=self._workspace_root or None,
        )
        try:
            stdout, stderr = await proc.communicate(json.dumps(request).encode("utf-8"))
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise

        return parse_reply(stdout, stderr, proc.returncode)
