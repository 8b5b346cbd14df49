from typing import List, Optional
import discord

MAX_MESSAGE_LENGTH = 2000


def split_message(message: str, max_length: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """
    Split a message on line boundaries into chunks no longer than max_length.
    Lines longer than max_length are cut into pieces.
    """
    if len(message) <= max_length:
        return [message]

    chunks = []
    current_chunk = ""

    for line in message.split('\n'):
        while len(line) + 1 > max_length:
            if current_chunk:
                chunks.append(current_chunk)
                current_chunk = ""
            chunks.append(line[:max_length])
            line = line[max_length:]

        if len(current_chunk) + len(line) + 1 <= max_length:
            current_chunk += line + '\n'
        else:
            chunks.append(current_chunk)
            current_chunk = line + '\n'

    if current_chunk:
        chunks.append(current_chunk)

    return chunks


async def send_chunked_message(channel: discord.abc.Messageable, message: str,
                               reference: Optional[discord.Message] = None):
    """
    Sends a message in chunks if it exceeds Discord's character limit
    """
    chunks = split_message(message)

    # Send first chunk with reference
    await channel.send(chunks[0], reference=reference)

    for chunk in chunks[1:]:
        await channel.send(chunk)
