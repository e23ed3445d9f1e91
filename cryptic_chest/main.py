# cryptic_chest/main.py
# Entry point: uvicorn cryptic_chest.main:app --reload
from cryptic_chest.app.main import app

__all__ = ["app"]

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cryptic_chest.main:app", host="0.0.0.0", port=5000)
