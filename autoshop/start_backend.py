#!/usr/bin/env python3
"""
Entitlements service startup wrapper.
"""
import os
import sys

# Add workspace to path
workspace_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, workspace_root)


def main() -> None:
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    print(f"[autoshop] Starting entitlements service on http://localhost:{port}")
    try:
        uvicorn.run(
            "autoshop.main:app",
            host=os.getenv("HOST", "0.0.0.0"),
            port=port,
            reload=False,
            log_level="info",
        )
    except KeyboardInterrupt:
        print("\n[autoshop] Shutting down...")
        sys.exit(0)


if __name__ == "__main__":
    main()
