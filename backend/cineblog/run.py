import os
import uvicorn
from dotenv import load_dotenv


def main() -> None:
    # Load environment variables (PORT, DATABASE_URL, TMDB_API_KEY, ...)
    load_dotenv()
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("cineblog.main:app", host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
