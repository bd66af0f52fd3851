#!/usr/bin/env python3
"""Interactive chat CLI for the Social OS agent."""

import json
import sys

import httpx
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt


class ChatCLI:
    """Interactive chat interface for the Social OS agent."""

    def __init__(self, base_url: str = "http://localhost:8000"):
        """Initialize chat CLI."""
        self.base_url = base_url
        self.session_id: str | None = None
        self.user_id: str | None = None
        self.console = Console()
        self.client = httpx.Client(timeout=60.0)

    def start(self) -> None:
        """Start the interactive chat session."""
        self.console.print(
            Panel.fit(
                "[bold magenta]Social OS - Your Personal Agent[/bold magenta]\n"
                "Type your messages to chat with your agent.\n"
                "Commands: /help, /users, /user <id>, /posts, /clear, /quit",
                border_style="magenta",
            )
        )

        if not self._test_connection():
            self.console.print(f"[red]Cannot connect to the service at {self.base_url}.[/red]")
            return

        self.console.print("[green]Connected to Social OS[/green]\n")

        try:
            while True:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")
                command = user_input.strip()

                if command.lower() in ["/quit", "/exit", "quit", "exit"]:
                    break
                elif command.lower() == "/help":
                    self._show_help()
                    continue
                elif command.lower() == "/clear":
                    self.session_id = None
                    self.console.print("[yellow]Session cleared[/yellow]")
                    continue
                elif command.lower() == "/users":
                    self._show_users()
                    continue
                elif command.lower().startswith("/user "):
                    self.user_id = command.split(maxsplit=1)[1]
                    self.session_id = None
                    self.console.print(f"[yellow]Chatting as user {self.user_id} (new session)[/yellow]")
                    continue
                elif command.lower() == "/posts":
                    self._show_posts()
                    continue
                elif command == "":
                    continue

                response = self._send_message(user_input)
                if response:
                    self._display_response(response)

        except KeyboardInterrupt:
            pass
        finally:
            self.console.print("\n[yellow]Goodbye![/yellow]")
            self.client.close()

    def _test_connection(self) -> bool:
        """Test connection to the service."""
        try:
            response = self.client.get(f"{self.base_url}/health")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def _send_message(self, message: str) -> dict | None:
        """Send message to the agent."""
        payload: dict = {"message": message}
        if self.session_id:
            payload["session_id"] = self.session_id
        if self.user_id:
            payload["user_id"] = self.user_id

        try:
            with self.console.status("[dim]Thinking...[/dim]"):
                response = self.client.post(f"{self.base_url}/conversation", json=payload)
        except httpx.HTTPError as e:
            self.console.print(f"[red]Connection error: {e}[/red]")
            return None

        if response.status_code != 200:
            self.console.print(f"[red]API Error: {response.status_code} - {response.text}[/red]")
            return None

        data = response.json()
        self.session_id = data.get("session_id")
        return data

    def _display_response(self, response: dict) -> None:
        """Display the agent's reply and any tool activity."""
        for message in response.get("messages", []):
            if message["role"] == "tool":
                style = "red" if message.get("is_error") else "dim"
                self.console.print(f"[{style}]tool {message.get('name')}: {message['content']}[/{style}]")

        self.console.print(
            Panel(
                Markdown(response.get("response") or "_(no reply)_"),
                title="[bold green]Agent[/bold green]",
                border_style="green",
                padding=(1, 2),
            )
        )

        for action in response.get("pending_actions", []):
            self.console.print(
                f"[yellow]Client action requested: {action['name']} {json.dumps(action['args'])}[/yellow]"
            )

    def _show_users(self) -> None:
        response = self.client.get(f"{self.base_url}/users")
        users = response.json() if response.status_code == 200 else []
        if not users:
            self.console.print("[dim]No users yet.[/dim]")
            return

        lines = "\n".join(f"• {u['display_name']} (@{u['username']}) - {u['id']}" for u in users)
        self.console.print(Panel(lines, title="[yellow]Users[/yellow]", border_style="yellow"))

    def _show_posts(self) -> None:
        response = self.client.get(f"{self.base_url}/posts", params={"limit": 10})
        posts = response.json() if response.status_code == 200 else []
        if not posts:
            self.console.print("[dim]The timeline is empty.[/dim]")
            return

        for post in posts:
            author = post.get("user") or {}
            self.console.print(
                Panel(
                    post["content"],
                    title=f"[bold]{author.get('display_name', post['user_id'])}[/bold]",
                    border_style="blue",
                )
            )

    def _show_help(self) -> None:
        """Show help information."""
        help_text = """
[bold]Available Commands:[/bold]
• /help - Show this help message
• /users - List users
• /user <id> - Chat as a user (uses their agent profile)
• /posts - Show the latest public posts
• /clear - Clear session and start over
• /quit or /exit - Exit the chat

[bold]Example Conversation:[/bold]
1. "Give me three post ideas about Python and open source"
2. "Write a humorous short post about the first one"
3. "Now an image prompt to go with it, watercolor style"
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]Help[/cyan]", border_style="cyan"))


def main():
    """Main entry point for the chat CLI."""
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"

    chat = ChatCLI(base_url)
    chat.start()


if __name__ == "__main__":
    main()
