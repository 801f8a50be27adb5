from minbar.clients.groq_client import GroqClient

__all__ = ["GroqClient"]
