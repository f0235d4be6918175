"""
Convenience script to start the FastAPI backend.

If port 8000 is taken, falls back to 8081-8084.

Usage:
    python run_backend.py
"""
import uvicorn
import socket
import sys


def is_port_in_use(port: int) -> bool:
    """Check whether a local port is already bound."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind(('127.0.0.1', port))
            return False
        except OSError:
            return True


def main():
    """Start the FastAPI server."""
    ports_to_try = [8000, 8081, 8082, 8083, 8084]
    port = next((p for p in ports_to_try if not is_port_in_use(p)), None)

    if port is None:
        print("Error: ports 8000-8084 are all in use, stop another service or pick a port manually")
        sys.exit(1)
    if port != 8000:
        print(f"Port 8000 is in use, switching to port {port}")

    print(f"Starting server: http://127.0.0.1:{port}")
    print(f"API docs: http://127.0.0.1:{port}/docs")

    uvicorn.run(
        "receipt_ocr.main:app",
        host="127.0.0.1",
        port=port,
        reload=True,
        log_level="info"
    )


if __name__ == "__main__":
    main()
