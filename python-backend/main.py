from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
import os
from dotenv import load_dotenv
from routes.lcc import router as lcc_router

load_dotenv()

app = FastAPI(title="Localization Content Comparer API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS", "HEAD"],
    allow_headers=["*"],
    expose_headers=["*"],
)

app.include_router(lcc_router)

@app.get("/")
async def root():
    return {"message": "Localization Content Comparer API", "status": "running"}

@app.get("/health")
async def health():
    return {"status": "healthy", "service": "localization-content-comparer"}

@app.head("/health")
async def health_head():
    return Response(status_code=200)

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
