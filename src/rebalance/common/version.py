from __future__ import annotations

import platform
import sys
from importlib import metadata


def _safe_pkg_version(name: str) -> str | None:
    try:
        return metadata.version(name)
    except metadata.PackageNotFoundError:
        return None


def get_build_info() -> dict[str, object]:
    """실행 환경 식별 정보.

    - run log에 함께 기록해서 "어떤 버전/환경에서 리샘플링했는가"를 남기기 위한 용도.
    - numpy 버전은 난수열/선형대수 결과에 영향을 줄 수 있으므로 같이 기록한다.
    """
    return {
        "package": {"name": "rebalance", "version": _safe_pkg_version("rebalance")},
        "numpy": {"version": _safe_pkg_version("numpy")},
        "python": {"version": sys.version.split()[0]},
        "platform": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
    }
