import sys
import wave

path = sys.argv[1] if len(sys.argv) > 1 else "extracted.wav"

with wave.open(path, "rb") as wf:
    print("sample_rate:", wf.getframerate())
    print("channels:", wf.getnchannels())
    print("sample_width_bytes:", wf.getsampwidth())
    print("frames:", wf.getnframes())
    print("duration_s:", wf.getnframes() / wf.getframerate())
