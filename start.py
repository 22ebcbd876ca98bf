"""RefScan launcher. Run: python start.py [--root PATH] [--port 8000]"""

import os
import sys

ROOT = os.path.dirname(os.path.abspath(__file__))


def _arg_value(name: str) -> str:
    for idx, token in enumerate(sys.argv[1:], start=1):
        if token == name and idx + 1 < len(sys.argv):
            return sys.argv[idx + 1].strip()
        if token.startswith(name + "="):
            return token.split("=", 1)[1].strip()
    return ""


def main():
    search_root = _arg_value("--root")
    if search_root:
        # Must be set before refscan.runtime_config is imported.
        os.environ["REFSCAN_ROOT"] = os.path.abspath(search_root)

    port_raw = _arg_value("--port") or os.environ.get("REFSCAN_PORT", "8000")
    try:
        port = int(port_raw)
    except ValueError:
        print(f"Invalid port: {port_raw}")
        raise SystemExit(2)

    import uvicorn

    print("RefScan starting up...")
    print(f"  Search root: {os.environ.get('REFSCAN_ROOT', os.getcwd())}")
    print(f"  Open: http://127.0.0.1:{port}/docs")
    uvicorn.run(
        "refscan.main:app",
        host=os.environ.get("REFSCAN_HOST", "127.0.0.1"),
        port=port,
        log_level="info",
        reload=False,
    )


if __name__ == "__main__":
    if ROOT not in sys.path:
        sys.path.insert(0, ROOT)
    main()
