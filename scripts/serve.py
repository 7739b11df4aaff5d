# Local development server for the view-state API.
import argparse
import os
from pathlib import Path

import uvicorn

PROJECT_ROOT = Path(__file__).parent.parent

if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Run the School Portal Core API locally.")
    parser.add_argument("--port", type=int, default=int(os.environ.get('PORT', 5000)))
    parser.add_argument("--test-mode", action="store_true", help="Enable TEST_MODE (debug logging).")
    args = parser.parse_args()

    # Must be set before the app (and its settings) is imported by uvicorn
    if args.test_mode:
        os.environ['TEST_MODE'] = 'True'

    uvicorn.run(
        "school_portal.main:app",
        host="127.0.0.1",
        port=args.port,
        reload=True,
        reload_dirs=[str(PROJECT_ROOT / "src")]
    )
