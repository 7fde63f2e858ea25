import os
import sys
import json
import pathlib
from dataclasses import asdict

from dotenv import load_dotenv, find_dotenv

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from foodiefind.services.extractor import RecommendationExtractor
from foodiefind.services.gemini_client import GeminiClient

SAMPLE_TRANSCRIPT = (
    "Today we are in Austin and the first stop is Franklin Barbecue. The brisket is unreal, "
    "totally worth the two hour line. After that we drove to Veracruz All Natural for the migas taco, "
    "easily one of the best breakfast tacos in the city. We skipped the chain place next door."
)


def run_extraction():
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(dotenv_path=env_path)

    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        raise ValueError("GEMINI_API_KEY not set. Add it to .env at the project root.")

    extractor = RecommendationExtractor(GeminiClient(api_key, model_name=os.getenv("GEMINI_MODEL", "gemini-2.5-flash")))

    print("Sending sample transcript to the model...")
    candidates = extractor.extract(SAMPLE_TRANSCRIPT, "48 hours eating in Austin")
    print(json.dumps([asdict(candidate) for candidate in candidates], indent=2, ensure_ascii=False))


if __name__ == "__main__":
    run_extraction()
