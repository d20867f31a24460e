import logging
from threading import Thread
from typing import Optional, Tuple

import discord
from discord.ext import commands

from imposter import game
from imposter.config import DISCORD_TOKEN, LOG_LEVEL, MAX_PLAYERS, MIN_PLAYERS, PORT, PREFIX
from imposter.errors import AlreadyRevealed, GameError, OutOfRange, StageMismatch
from imposter.prompts import CONFIRM, NEXT, Prompt, apply_action, build_prompt
from imposter.store import SessionStore
from imposter.words import WordList
from web import create_app

log = logging.getLogger(__name__)

ACTION_PREFIX = "imposter:"


# =========================
# HELPERS
# =========================
def e(title: str, desc: str = "", color: discord.Color = discord.Color.blurple()) -> discord.Embed:
    return discord.Embed(title=title, description=desc, color=color)


def channel_key(guild_id: Optional[int], channel_id: int) -> Tuple[int, int]:
    return (guild_id or 0, channel_id)


def fmt_names(names) -> str:
    return ", ".join(names) if names else "—"


# =========================
# EMBEDS
# =========================
def setup_embed(prompt: Prompt) -> discord.Embed:
    d = prompt.data
    if prompt.kind == "player_count":
        return e("🆕 New game!", f"How many players? Send a number (**{d['min']} - {d['max']}**).")
    if prompt.kind == "names":
        emb = e("📝 Player names", "Send the names separated by commas or new lines.\nMissing names are filled in automatically.")
        emb.add_field(name="Current", value="\n".join(f"• {n}" for n in d["names"]), inline=False)
        return emb
    return e("🎭 How many imposters?", f"Send a number (**{d['min']} - {d['max']}**).")


def reveal_embed(prompt: Prompt) -> discord.Embed:
    d = prompt.data
    intro = f"👤 **{d['player']}**\nTurn {d['progress']}"
    if not d["revealed"]:
        return e("🎭 Reveal your word", f"{intro}\n\nMake sure nobody else is looking, then press **Show word**.")

    if d["is_imposter"]:
        emb = e("🕵️ You are the IMPOSTER", f"{intro}\n\nBlend in. Don’t get caught.", discord.Color.red())
        emb.add_field(name="Secret Word", value="❌ You don’t know it.", inline=False)
    else:
        emb = e("✅ You are a CIVILIAN", f"{intro}\n\nRemember it, then pass the device on.", discord.Color.green())
        emb.add_field(name="Secret Word", value=f"**{d['word']}**", inline=False)
    return emb


def ballot_embed(prompt: Prompt) -> discord.Embed:
    d = prompt.data
    desc = f"Turn {d['progress']}\n\nCurrent pick: **{d['selected_name'] or '—'}**"
    return e(f"🗳 {d['voter']}, who is the imposter?", desc, discord.Color.gold())


def result_embed(prompt: Prompt) -> discord.Embed:
    d = prompt.data
    reveal = e("🎬 Reveal!", f"Secret word was: **{d['word']}**", discord.Color.purple())
    reveal.add_field(name="Imposter(s)", value=fmt_names(d["imposters"]), inline=False)

    summary = [
        f"🗳 {p['name']}{' (imposter)' if p['is_imposter'] else ''}: **{p['votes']}**"
        for p in d["players"]
    ]
    reveal.add_field(name="Vote Summary", value="\n".join(summary), inline=False)
    if d["max_votes"] > 0:
        reveal.add_field(name="Most accused", value=fmt_names(d["most_accused"]), inline=False)
    else:
        reveal.add_field(name="Most accused", value="No votes were cast.", inline=False)
    reveal.set_footer(text=f"Use {PREFIX}newgame to play again.")
    return reveal


def prompt_embed(prompt: Prompt) -> discord.Embed:
    if prompt.kind == "reveal":
        return reveal_embed(prompt)
    if prompt.kind == "ballot":
        return ballot_embed(prompt)
    if prompt.kind == "result":
        return result_embed(prompt)
    return setup_embed(prompt)


# =========================
# GAME VIEW (REVEAL + BALLOT BUTTONS)
# =========================
class ActionButton(discord.ui.Button):
    def __init__(self, action: str, **kwargs):
        super().__init__(custom_id=ACTION_PREFIX + action, **kwargs)
        self.action = action

    async def callback(self, interaction: discord.Interaction):
        await self.view.cog.on_action(interaction, self.action)


class GameView(discord.ui.View):
    def __init__(self, cog: "ImposterCog", prompt: Prompt):
        super().__init__(timeout=None)
        self.cog = cog

        if prompt.kind == "reveal":
            if prompt.data["revealed"]:
                self.add_item(ActionButton(NEXT, label="Next player", style=discord.ButtonStyle.primary, emoji="➡️"))
            else:
                self.add_item(ActionButton(prompt.actions[0], label="Show word", style=discord.ButtonStyle.primary, emoji="👁️"))

        elif prompt.kind == "ballot":
            for t in prompt.data["targets"]:
                self.add_item(ActionButton(
                    f"vote:select:{t['index']}",
                    label=(f"✅ {t['name']}" if t["selected"] else t["name"])[:80],
                    style=discord.ButtonStyle.success if t["selected"] else discord.ButtonStyle.secondary,
                    row=t["index"] // 4,
                ))
            self.add_item(ActionButton(CONFIRM, label="Confirm vote", style=discord.ButtonStyle.primary, emoji="🗳", row=3))


def render(cog: "ImposterCog", session: game.Session):
    prompt = build_prompt(session)
    view = GameView(cog, prompt) if prompt.actions else None
    return prompt_embed(prompt), view


# =========================
# COMMANDS + EVENTS
# =========================
class ImposterCog(commands.Cog):
    def __init__(self, bot: commands.Bot, sessions: SessionStore, words: WordList, prefix: str = PREFIX):
        self.bot = bot
        self.sessions = sessions
        self.words = words
        self.prefix = prefix

    @commands.command(name="help")
    async def cmd_help(self, ctx: commands.Context):
        h = e("🎭 Imposter — Help")
        p = self.prefix
        h.add_field(name="Commands", value=f"`{p}newgame` `{p}start` `{p}words` `{p}help`", inline=False)
        h.add_field(name="Setup", value=f"Send the number of players ({MIN_PLAYERS} - {MAX_PLAYERS}), their names (comma or new line separated), then the number of imposters.", inline=False)
        h.add_field(name="Reveal", value="Pass the device around: each player presses **Show word**, reads it, then **Next player**.", inline=False)
        h.add_field(name="Voting", value="Each player picks a suspect and presses **Confirm vote**. Then the word and the imposter(s) are revealed.", inline=False)
        await ctx.send(embed=h)

    @commands.command(name="start")
    async def cmd_start(self, ctx: commands.Context):
        self.sessions.reset(channel_key(ctx.guild and ctx.guild.id, ctx.channel.id))
        await ctx.send(embed=e(
            "👋 Welcome to Imposter!",
            f"Everyone plays on one device, one player at a time.\n\n👉 Run `{self.prefix}newgame` to begin.",
        ))

    @commands.command(name="newgame")
    async def cmd_newgame(self, ctx: commands.Context):
        key = channel_key(ctx.guild and ctx.guild.id, ctx.channel.id)
        session = self.sessions.reset(key)
        log.info("new game in %s", key)
        await ctx.send(embed=setup_embed(build_prompt(session)))

    @commands.command(name="words")
    async def cmd_words(self, ctx: commands.Context):
        await ctx.send(embed=e("📚 Words", f"{len(self.words)} words in the list."))

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if message.author.bot or message.content.startswith(self.prefix):
            return

        key = channel_key(message.guild and message.guild.id, message.channel.id)
        if key not in self.sessions:
            return

        try:
            session = self.sessions.update(key, game.handle_text, message.content.strip(), self.words.pick)
        except OutOfRange as err:
            return await message.channel.send(embed=e("⛔ Out of range", f"Enter a number between **{err.low}** and **{err.high}**.", discord.Color.red()))
        except StageMismatch:
            return await message.channel.send(embed=e("ℹ️ Game in progress", f"Use the buttons, or `{self.prefix}newgame` to start a new game."))

        if session.stage is game.Stage.REVEALING:
            log.info("game %s: %d players, %d imposter(s)", key, session.player_count, session.imposter_count)
            ready = e("🃏 Cards are dealt!", f"Players: **{session.player_count}**\nImposters: **{session.imposter_count}**")
            ready.add_field(name="Order", value=fmt_names(session.player_names), inline=False)
            await message.channel.send(embed=ready)

        embed, view = render(self, session)
        await message.channel.send(embed=embed, view=view)

    async def on_action(self, interaction: discord.Interaction, action: str):
        key = channel_key(interaction.guild_id, interaction.channel_id)
        try:
            session = self.sessions.update(key, apply_action, action)
        except StageMismatch:
            return await interaction.response.send_message("This button is no longer active.", ephemeral=True)
        except AlreadyRevealed as err:
            return await interaction.response.send_message(str(err), ephemeral=True)
        except GameError as err:
            return await interaction.response.send_message(f"⚠️ {err}", ephemeral=True)

        embed, view = render(self, session)

        # Phase changes close the current card and post a fresh one below it.
        if action == NEXT and session.stage is game.Stage.VOTING:
            await interaction.response.edit_message(embed=e("✅ Everyone has seen their word", "Discuss, then vote!"), view=None)
            await interaction.channel.send(embed=embed, view=view)
        elif action == CONFIRM:
            await interaction.response.edit_message(embed=e("✅ Vote recorded", "", discord.Color.green()), view=None)
            if session.stage is game.Stage.FINISHED:
                log.info("game %s: finished", key)
            await interaction.channel.send(embed=embed, view=view)
        else:
            await interaction.response.edit_message(embed=embed, view=view)


# =========================
# BOT
# =========================
class ImposterBot(commands.Bot):
    def __init__(self, sessions: Optional[SessionStore] = None, words: Optional[WordList] = None):
        super().__init__(command_prefix=PREFIX, intents=discord.Intents.all(), help_command=None)
        self.sessions = sessions or SessionStore()
        self.words = words or WordList()

    async def setup_hook(self):
        await self.add_cog(ImposterCog(self, self.sessions, self.words))

    async def on_ready(self):
        log.info("Logged in as %s (id=%s)", self.user, self.user.id)


def run_web(app):
    app.run(host="0.0.0.0", port=PORT)


def main():
    if not DISCORD_TOKEN:
        raise RuntimeError("Missing DISCORD_TOKEN. Put it in .env as DISCORD_TOKEN=...")

    words = WordList()
    Thread(target=run_web, args=(create_app(words=words),), daemon=True).start()
    ImposterBot(words=words).run(DISCORD_TOKEN, log_level=getattr(logging, LOG_LEVEL.upper(), logging.INFO))


if __name__ == "__main__":
    main()
