import sys, pathlib
ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from foodiefind.services.ids import extract_video_id
from foodiefind.services.timestamps import format_timestamp
from foodiefind.services.transcripts import YouTubeCaptionSource

URL = sys.argv[1] if len(sys.argv) > 1 else "https://www.youtube.com/watch?v=_nJw6nnQms8"

video_id = extract_video_id(URL)
if not video_id:
    sys.exit(f"not a YouTube video url: {URL}")

entries = YouTubeCaptionSource().get_captions(video_id)
print("video_id:", video_id)
print("captions:", len(entries))
for entry in entries[:10]:
    print(format_timestamp(int(entry.offset_seconds)), entry.text)
