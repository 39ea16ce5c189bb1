import logging

from fastapi import FastAPI

from phytoscan import __version__
from phytoscan.api import diagnosis, diseases, history

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="PhytoScan", version=__version__)

# Include routers
app.include_router(diagnosis.router)
app.include_router(history.router)
app.include_router(diseases.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
