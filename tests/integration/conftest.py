from dotenv import load_dotenv

# Integration tests read their endpoints and tokens from .env like the app does.
load_dotenv()
