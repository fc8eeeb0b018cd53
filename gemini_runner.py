#!/usr/bin/env python3
"""Send the prompt on stdin to Gemini and print the raw reply."""
import sys
import os
import time
from pathlib import Path

from dotenv import load_dotenv
from google import generativeai as genai
from google.api_core import exceptions

from gemini_key import ApiKeyNotFound, resolve_api_key, settings_paths

DEFAULT_MODEL = 'gemini-2.0-flash'
MAX_ATTEMPTS = 3


class RetriesExhausted(RuntimeError):
    pass


def build_model(api_key, model_name=None):
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name or os.getenv('GEMINI_MODEL', DEFAULT_MODEL))


def generate_with_retry(model, prompt, sleep=None):
    """Generate once, backing off 2s, 4s, 6s on 429s. Other errors propagate."""
    sleep = sleep or time.sleep
    attempts = 0
    while attempts < MAX_ATTEMPTS:
        try:
            response = model.generate_content(prompt)
            return response.text
        except exceptions.TooManyRequests:
            attempts += 1
            delay = attempts * 2
            print(f"Rate limit hit (429). Retrying in {delay}s...", file=sys.stderr)
            sleep(delay)
    raise RetriesExhausted("Failed after max retries due to rate limits.")


def read_prompt(stream):
    # stdin is decoded as UTF-8 whatever the locale
    data = getattr(stream, 'buffer', stream).read()
    if isinstance(data, bytes):
        data = data.decode('utf-8', errors='replace')
    return data


def main(stdin=None):
    load_dotenv(Path.cwd() / '.env')
    try:
        api_key = resolve_api_key(settings_paths())
    except ApiKeyNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    prompt = read_prompt(stdin or sys.stdin)
    if not prompt.strip():
        print("Error: Empty prompt received from stdin.", file=sys.stderr)
        return 1

    model = build_model(api_key)
    try:
        text = generate_with_retry(model, prompt)
    except RetriesExhausted as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error generating content: {e}", file=sys.stderr)
        return 1

    print(text)
    return 0


if __name__ == '__main__':
    sys.exit(main())
