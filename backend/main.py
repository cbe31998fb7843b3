import uvicorn
import sys
import os

# frozen builds resolve paths from the executable
if getattr(sys, 'frozen', False):
    application_path = os.path.dirname(sys.executable)
    os.chdir(application_path)
else:
    application_path = os.path.dirname(os.path.abspath(__file__))

if __name__ == "__main__":
    is_dev = not getattr(sys, 'frozen', False)

    uvicorn.run(
        "freight.main:app",
        host="127.0.0.1",
        port=8000,
        reload=is_dev,
        log_level="info"
    )
