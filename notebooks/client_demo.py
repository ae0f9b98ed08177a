# %% [markdown]
# # Mnexium Client Demo
#
# This notebook walks through the Mnexium memory API:
# 1. Chat with memory learning turned on
# 2. Watch a newer fact supersede an older one
# 3. Recall facts in a fresh chat, through a different provider
# 4. Use agent state, profiles and managed prompts

# %% [markdown]
# ## Setup
#
# Put your keys in `.env.local` (or `.env`):
# ```bash
# MNX_KEY=mnx_...
# OPENAI_KEY=sk-...
# CLAUDE_API_KEY=sk-ant-...   # optional, for the cross-provider step
# ```

# %%
import asyncio
from uuid import uuid4

from dotenv import load_dotenv
load_dotenv(".env.local")
load_dotenv()

from mnexium import MnexiumClient, MnxOptions

# %% [markdown]
# ## Create a Client
#
# `MnexiumClient.from_settings()` reads keys from the environment and
# `config/*.toml`.

# %%
SUBJECT_ID = f"notebook_{uuid4().hex[:8]}"
print(f"Subject ID: {SUBJECT_ID}")

client = MnexiumClient.from_settings()

# %% [markdown]
# ## Helper function for async calls in Jupyter

# %%
def run(coro):
    """Run async coroutine in Jupyter."""
    try:
        loop = asyncio.get_event_loop()
        if loop.is_running():
            import nest_asyncio
            nest_asyncio.apply()
        return loop.run_until_complete(coro)
    except RuntimeError:
        return asyncio.run(coro)

# %% [markdown]
# ## Teach a Fact
#
# `learn="force"` always runs fact extraction on the turn.

# %%
learn = MnxOptions(subject_id=SUBJECT_ID, chat_id=str(uuid4()), log=True, learn="force")

reply = run(client.chat_completion(
    [{"role": "user", "content": "My favorite fruit is blueberry."}],
    mnx=learn,
))
print(reply.text)

# %% [markdown]
# ## Change It
#
# Extraction is asynchronous; give the service a few seconds between steps.

# %%
run(asyncio.sleep(5))

learn = MnxOptions(subject_id=SUBJECT_ID, chat_id=str(uuid4()), log=True, learn="force")
reply = run(client.chat_completion(
    [{"role": "user", "content": "Actually, my favorite fruit is now apple."}],
    mnx=learn,
))
print(reply.text)

# %% [markdown]
# ## Inspect Memories
#
# The blueberry fact should now be superseded.

# %%
run(asyncio.sleep(5))

memories = run(client.list_memories(SUBJECT_ID, include_superseded=True))
for memory in memories.data:
    print(f"[{memory.status}] {memory.text}")

# %% [markdown]
# ## Recall in a New Chat

# %%
reply = run(client.chat_completion(
    [{"role": "user", "content": "What's my favorite fruit?"}],
    mnx={"subject_id": SUBJECT_ID, "recall": True},
))
print(reply.text)

# %% [markdown]
# ## Recall Through Claude
#
# The same subject ID shares facts across providers.

# %%
from mnexium.client import Provider

if client.has_provider_key(Provider.ANTHROPIC):
    reply = run(client.chat_completion(
        [{"role": "user", "content": "What's my favorite fruit?"}],
        model="claude-3-haiku-20240307",
        mnx={"subject_id": SUBJECT_ID, "recall": True},
        max_tokens=100,
    ))
    print(reply.text)
else:
    print("Set CLAUDE_API_KEY to try this step")

# %% [markdown]
# ## Agent State
#
# Short-term working memory keyed per subject.

# %%
run(client.put_state("task:trip", {"step": 2, "city": "Lisbon"}, SUBJECT_ID, ttl_seconds=600))
state = run(client.get_state("task:trip", SUBJECT_ID))
print(state.value)

# %% [markdown]
# ## Profile and Prompts

# %%
run(client.update_profile(SUBJECT_ID, [{"field_key": "name", "value": "Ada", "confidence": 0.9}]))
profile = run(client.get_profile(SUBJECT_ID))
print(f"Name: {profile.get('name')}")

prompt = run(client.create_prompt(
    "Notebook tone",
    "Answer in one short sentence.",
    scope="subject",
    scope_id=SUBJECT_ID,
))
resolved = run(client.resolve_prompt(subject_id=SUBJECT_ID, combined=True))
print(resolved.prompt_text)

# %% [markdown]
# ## Cleanup

# %%
run(client.delete_prompt(prompt.id))
run(client.delete_state("task:trip", SUBJECT_ID))
for memory in run(client.list_memories(SUBJECT_ID, include_superseded=True)).data:
    run(client.delete_memory(memory.id))

run(client.close())
print("Client closed")
