"""VisionChat — Groq-backed chat relay (text + image) and its client."""
