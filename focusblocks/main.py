import logging

from fastapi import FastAPI

from focusblocks.config import LOG_LEVEL
from focusblocks.routes import schedule, reschedule

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Create FastAPI app
app = FastAPI(
    title="Focus Blocks API",
    description="Places weekly focus blocks into free calendar time and sanitizes assistant-proposed reschedules",
    version="1.0.0"
)

# Include routers
app.include_router(schedule.router, prefix="/schedule", tags=["schedule"])
app.include_router(reschedule.router, prefix="/reschedule", tags=["reschedule"])


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}


# This allows running the app directly with: python -m focusblocks.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("focusblocks.main:app", host="0.0.0.0", port=8000, reload=True)
