"""
Run Policy Server

Helper script to start the FastAPI policy service.
"""

import uvicorn
from arc_policy.config import settings


def main():
    """Start the policy service."""
    print("=" * 60)
    print("  ARC Policy Service")
    print("  Starting FastAPI server...")
    print("=" * 60)
    print(f"\n🌐 Service will run at: http://{settings.host}:{settings.port}")
    print(f"📊 API docs available at: http://{settings.host}:{settings.port}/docs")
    if settings.config_path:
        print(f"📋 Policy configuration: {settings.config_path}")
    else:
        print("📋 No policy configuration set, using built-in rules")
    print("\nPress Ctrl+C to stop\n")

    uvicorn.run(
        "arc_policy.server:app",
        host=settings.host,
        port=settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
