from __future__ import annotations

import logging
from typing import Callable, Optional

from igpackage.core.archive import load_package, save_package
from igpackage.core.builder import build_package
from igpackage.core.validator import validate_manifest
from igpackage.models import CheckSummary, ExpectedMetadata, PackageContext

logger = logging.getLogger(__name__)

DiagnosticSink = Callable[[str], None]


def _log_sink(line: str) -> None:
    logger.warning(line)


class PackageChecker:
    """
    Checks package.tgz in an output folder against what the build expects,
    or builds it when the folder has none yet.
    """

    def __init__(self, ctx: PackageContext, sink: Optional[DiagnosticSink] = None):
        self.ctx = ctx
        self.sink = sink or _log_sink

    def check(self, expected: ExpectedMetadata) -> CheckSummary:
        pf = self.ctx.package_path
        if not pf.exists():
            build_package(self.ctx, expected)
            return CheckSummary(action="built", package_path=str(pf))

        pkg = load_package(str(pf))
        diagnostics = validate_manifest(str(pf), pkg.manifest, expected)
        for d in diagnostics:
            self.sink(d.problem_line())

        summary = CheckSummary(action="validated", package_path=str(pf), diagnostics=diagnostics)
        if pkg.changed_by_loader:
            save_package(pkg, str(pf))
            summary.resaved = True
        return summary
