import uvicorn
from bharatgpt.main import app

if __name__ == "__main__":
    uvicorn.run(
        "bharatgpt.main:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        ws_ping_interval=20,
        ws_ping_timeout=20
    )
