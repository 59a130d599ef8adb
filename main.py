"""
This file is used to run the application from the root directory.
It simply imports and runs the FastAPI app from the focus_agent package.
"""
import uvicorn

if __name__ == "__main__":
    uvicorn.run("focus_agent.main:app", host="0.0.0.0", port=8000, reload=True)
