from fastapi import FastAPI
from nongli.api.public import router as public_router

app = FastAPI(title="nongli public api")
app.include_router(public_router)
