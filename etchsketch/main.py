from fastapi import FastAPI
from .drawing.api import router as drawing_router

app = FastAPI(title="Etch-A-Sketch Stroke Service")
app.include_router(drawing_router)


@app.get("/health")
def health():
    return {"status": "ok"}
