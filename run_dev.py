# run_dev.py
"""
Local development launcher for FastAPI.
Equivalent to: `uvicorn eduprompt.app:app --reload --host 0.0.0.0 --port 8000`
Set USE_ECHO=1 to run without an OpenAI key.
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "eduprompt.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
