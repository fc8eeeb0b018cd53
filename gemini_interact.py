#!/usr/bin/env python3
"""Chat with Gemini in the terminal using a persona from .claude/commands."""
import sys
import os
from pathlib import Path

from dotenv import load_dotenv
from google import generativeai as genai

from gemini_key import ApiKeyNotFound, resolve_api_key, settings_paths

DEFAULT_MODEL = 'gemini-1.5-pro'
MAX_OUTPUT_TOKENS = 8000
PERSONA_PREFIXES = ('mc:', 'mc-')
EXIT_WORDS = ('exit', 'quit')

CYAN = '\x1b[36m'
GREY = '\x1b[90m'
GREEN = '\x1b[32m'
YELLOW = '\x1b[33m'
RESET = '\x1b[0m'
CLEAR_LINE = '\r\x1b[2K'

PROMPT = f"{GREEN}You: {RESET}"
LABEL = f"{YELLOW}Gemini: {RESET}"


class PersonaNotFound(RuntimeError):
    pass


def normalize_persona_name(name):
    for prefix in PERSONA_PREFIXES:
        if name.startswith(prefix):
            return name[len(prefix):]
    return name


def persona_path(name, cwd=None):
    filename = f"mc-{normalize_persona_name(name)}.md"
    return Path(cwd or os.getcwd()) / '.claude' / 'commands' / filename


def load_persona(path):
    path = Path(path)
    if not path.is_file():
        raise PersonaNotFound(f"Command file not found at {path}")
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise PersonaNotFound(f"Could not read command file {path}: {e}") from e
    if not text.strip():
        raise PersonaNotFound(f"Command file is empty: {path}")
    return text


def start_chat(api_key, persona, model_name=None):
    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(
        model_name or os.getenv('GEMINI_MODEL', DEFAULT_MODEL),
        system_instruction=persona,
        generation_config={'max_output_tokens': MAX_OUTPUT_TOKENS},
    )
    return model.start_chat(history=[])


def run_session(chat, stdin=None, stdout=None, stderr=None):
    """Relay one stdin line per turn until exit/quit or end of input."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    while True:
        print(PROMPT, end='', file=stdout, flush=True)
        line = stdin.readline()
        if not line:
            break
        user_input = line.strip()
        if user_input.lower() in EXIT_WORDS:
            break
        if not user_input:
            continue

        print(f"{LABEL}Thinking...", end='', file=stdout, flush=True)
        try:
            response = chat.send_message(user_input)
            text = response.text
        except Exception as e:
            print(CLEAR_LINE, end='', file=stdout, flush=True)
            print(f"Error: {e}\n", file=stderr)
            continue
        print(CLEAR_LINE, end='', file=stdout)
        print(f"{LABEL}{text}\n", file=stdout, flush=True)

    print("\nSession ended.", file=stdout)
    return 0


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    load_dotenv(Path.cwd() / '.env')
    try:
        api_key = resolve_api_key(settings_paths(include_env_file=True))
    except ApiKeyNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not argv:
        print("Usage: gemini-interact <command_name>", file=sys.stderr)
        print("Example: gemini-interact interrogate", file=sys.stderr)
        return 1

    name = normalize_persona_name(argv[0])
    try:
        persona = load_persona(persona_path(argv[0]))
    except PersonaNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    chat = start_chat(api_key, persona)
    print(f"{CYAN}Starting interactive session for: {name}{RESET}")
    print(f"{GREY}(Type 'exit' or 'quit' to stop){RESET}\n")
    return run_session(chat)


if __name__ == '__main__':
    sys.exit(main())
