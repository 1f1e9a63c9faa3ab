import asyncio
import os
from typing import Annotated

from dotenv import load_dotenv
from pydantic import Field

from autopilot import AgentLoop, ToolRegistry
from autopilot.agent_core.system_prompt import build_system_prompt
from autopilot.providers import OpenAIClient
from autopilot.tools import register_builtin_tools

# Load environment variables
load_dotenv()


async def main() -> None:
    """
    Chat with the agent using OpenAI, the built-in tools and one custom tool.
    """
    print("Welcome to the AutoPilot chat example (OpenAI)!")

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        print("Error: OPENAI_API_KEY not found in environment variables.")
        return

    registry = ToolRegistry()
    register_builtin_tools(registry)

    @registry.tool
    def word_count(text: Annotated[str, Field(description="The text to count words in")]) -> int:
        """Count the words in a piece of text."""
        return len(text.split())

    client = OpenAIClient(model="gpt-4o-mini", api_key=api_key)
    system_prompt = build_system_prompt(registry, provider="openai", model=client.model)
    loop = AgentLoop(client, registry, system_prompt)

    print("\nStart chatting! Type 'exit' or 'quit' to stop.")
    while True:
        user_input = input("\nYou: ").strip()
        if user_input.lower() in ["exit", "quit"]:
            print("Goodbye!")
            break

        if not user_input:
            continue

        try:
            result = await loop.run(user_input)
            print(f"Assistant: {result.reply}")
            for call in result.tool_calls:
                print(f"  [tool] {call.name} -> {'error' if call.result.is_error else 'ok'}")

        except Exception as e:
            print(f"An error occurred: {e}")


if __name__ == "__main__":
    asyncio.run(main())
