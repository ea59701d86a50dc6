"""Novelty and portfolio commands, plus YAML command packs.

These live in an open, string-keyed table so packs and callers can add
commands at runtime.  Random picks go through ``RAND`` (seeded) so output
is reproducible between runs.
"""

import random
import time
from collections import OrderedDict
from typing import TYPE_CHECKING, Callable, Dict, List

from colorama import Fore, Style

from devterm.commands import Command, Handler
from devterm.config import HOSTNAME, PRODUCT, VERSION
from devterm.output import OutputLine, bold, c, lines, ok, out

if TYPE_CHECKING:
    from devterm.shell import ShellContext

RAND = random.Random(42)

NOVELTY: "OrderedDict[str, Command]" = OrderedDict()


def novelty(name: str, description: str, usage: str = "", category: str = "fun") -> Callable[[Handler], Handler]:
    def register(fn: Handler) -> Handler:
        NOVELTY[name] = Command(name, description, usage or name, fn, category)
        return fn
    return register


def canned_command(name: str, text_lines: List[str]) -> Command:
    """Build a command that prints fixed lines (used for YAML packs)."""
    frozen = list(text_lines)

    def _canned(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
        return lines(frozen)

    return Command(name, "Custom command", name, _canned, "custom")


# ---------- fun ----------

@novelty("neofetch", "Display system information")
def h_neofetch(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    user = ctx.env.get("USER", "guest")
    logo = f"{Fore.WHITE}"
    star = f"{Fore.BLUE}"
    rst = Style.RESET_ALL
    pad = " " * 34
    return [
        out(),
        ok(f"   {logo}██████████{rst}                    {bold(f'{user}@{HOSTNAME}')}"),
        ok(f"   {logo}██      ██{rst}                    ─────────────────────"),
        ok(f"   {logo}██      ██{rst}          {star}│{rst}         OS: {PRODUCT} OS 2.0"),
        ok(f"   {logo}██████████{rst}      {star}─── ┼ ───{rst}      Host: Portfolio v{VERSION}"),
        ok(f"   {logo}██      ██{rst}          {star}│{rst}         Kernel: Next.js 14.1.0"),
        ok(f"   {logo}██      ██{rst}                    Uptime: Always Online"),
        ok(f"   {logo}██████████{rst}                    Packages: 341 (npm)"),
        ok(f"{pad}Shell: devterm-sh 2.0"),
        ok(f"{pad}Terminal: {PRODUCT} Terminal"),
        ok(f"{pad}CPU: TypeScript Engine"),
        ok(f"{pad}Memory: 128MB / 512MB"),
        out(),
        out(f"{pad}Node: v{ctx.env.get('NODE_VERSION', '')}"),
        out(f"{pad}NPM: v{ctx.env.get('NPM_VERSION', '')}"),
        out(),
    ]


@novelty("cowsay", "ASCII cow says your message", "cowsay <message>")
def h_cowsay(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    msg = " ".join(args) or "Moo!"
    border = "─" * (len(msg) + 2)
    return [
        out(f" ╭{border}╮"),
        out(f" │ {msg} │"),
        out(f" ╰{border}╯"),
        out("        \\   ^__^"),
        out("         \\  (oo)\\_______"),
        out("            (__)\\       )\\/\\"),
        out("                ||----w |"),
        out("                ||     ||"),
    ]


_MATRIX_CHARS = "ﾊﾐﾋｰｳｼﾅﾓﾆｻﾜﾂｵﾘｱﾎﾃﾏｹﾒｴｶｷﾑﾕﾗｾﾈｽﾀﾇﾍ01234567890"


@novelty("matrix", "Matrix rain effect")
def h_matrix(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    result = []
    for _ in range(8):
        row = "".join(RAND.choice(_MATRIX_CHARS) for _ in range(60))
        result.append(ok(c(row, Fore.GREEN)))
    result.append(out("[Matrix simulation - Press any key to exit]"))
    return result


# 6-row block font; unknown characters fall back to '?'
FIGLET_FONT: Dict[str, List[str]] = {
    "A": ["██████╗ ", "██╔══██╗", "███████║", "██╔══██║", "██║  ██║", "╚═╝  ╚═╝"],
    "B": ["██████╗ ", "██╔══██╗", "██████╔╝", "██╔══██╗", "██████╔╝", "╚═════╝ "],
    "C": ["██████╗ ", "██╔══██╗", "██║     ", "██║     ", "╚██████╗", " ╚═════╝"],
    "D": ["██████╗ ", "██╔══██╗", "██║  ██║", "██║  ██║", "██████╔╝", "╚═════╝ "],
    "E": ["███████╗", "██╔════╝", "█████╗  ", "██╔══╝  ", "███████╗", "╚══════╝"],
    "F": ["███████╗", "██╔════╝", "█████╗  ", "██╔══╝  ", "██║     ", "╚═╝     "],
    "G": ["██████╗ ", "██╔════╝", "██║  ███╗", "██║   ██║", "╚██████╔╝", " ╚═════╝ "],
    "H": ["██╗  ██╗", "██║  ██║", "███████║", "██╔══██║", "██║  ██║", "╚═╝  ╚═╝"],
    "I": ["██╗", "██║", "██║", "██║", "██║", "╚═╝"],
    "J": ["     ██╗", "     ██║", "     ██║", "██   ██║", "╚█████╔╝", " ╚════╝ "],
    "K": ["██╗  ██╗", "██║ ██╔╝", "█████╔╝ ", "██╔═██╗ ", "██║  ██╗", "╚═╝  ╚═╝"],
    "L": ["██╗     ", "██║     ", "██║     ", "██║     ", "███████╗", "╚══════╝"],
    "M": ["███╗   ███╗", "████╗ ████║", "██╔████╔██║", "██║╚██╔╝██║", "██║ ╚═╝ ██║", "╚═╝     ╚═╝"],
    "N": ["███╗   ██╗", "████╗  ██║", "██╔██╗ ██║", "██║╚██╗██║", "██║ ╚████║", "╚═╝  ╚═══╝"],
    "O": ["██████╗ ", "██╔══██╗", "██║  ██║", "██║  ██║", "╚██████╔╝", " ╚═════╝ "],
    "P": ["██████╗ ", "██╔══██╗", "██████╔╝", "██╔═══╝ ", "██║     ", "╚═╝     "],
    "Q": ["██████╗ ", "██╔══██╗", "██║  ██║", "██║  ██║", "╚██████╗", " ╚═════╝"],
    "R": ["██████╗ ", "██╔══██╗", "██████╔╝", "██╔══██╗", "██║  ██║", "╚═╝  ╚═╝"],
    "S": ["███████╗", "██╔════╝", "███████╗", "╚════██║", "███████║", "╚══════╝"],
    "T": ["████████╗", "╚══██╔══╝", "   ██║   ", "   ██║   ", "   ██║   ", "   ╚═╝   "],
    "U": ["██╗  ██╗", "██║  ██║", "██║  ██║", "██║  ██║", "╚█████╔╝", " ╚════╝ "],
    "V": ["██╗   ██╗", "██║   ██║", "██║   ██║", "╚██╗ ██╔╝", " ╚████╔╝ ", "  ╚═══╝  "],
    "W": ["██╗    ██╗", "██║    ██║", "██║ █╗ ██║", "██║███╗██║", "╚███╔███╔╝", " ╚══╝╚══╝ "],
    "X": ["██╗  ██╗", "╚██╗██╔╝", " ╚███╔╝ ", " ██╔██╗ ", "██╔╝ ██╗", "╚═╝  ╚═╝"],
    "Y": ["██╗   ██╗", "╚██╗ ██╔╝", " ╚████╔╝ ", "  ╚██╔╝  ", "   ██║   ", "   ╚═╝   "],
    "Z": ["████████╗", "╚══██╔══╝", "   ██╔╝  ", "  ██╔╝   ", " ████████╗", "╚════════╝"],
    "0": ["██████╗ ", "██╔═██╗ ", "██║ ██║ ", "██║ ██║ ", "╚████╔╝ ", " ╚═══╝  "],
    "1": [" ██╗", "███║", "╚██║", " ██║", " ██║", " ╚═╝"],
    "2": ["██████╗ ", "╚════██╗", " █████╔╝", "██╔═══╝ ", "███████╗", "╚══════╝"],
    "3": ["██████╗ ", "╚════██╗", " █████╔╝", " ╚═══██╗", "██████╔╝", "╚═════╝ "],
    "4": ["██╗  ██╗", "██║  ██║", "███████║", "╚════██║", "     ██║", "     ╚═╝"],
    "5": ["███████╗", "██╔════╝", "███████╗", "╚════██║", "███████║", "╚══════╝"],
    "6": ["██████╗ ", "██╔════╝", "███████╗", "██╔══██║", "██████╔╝", "╚═════╝ "],
    "7": ["████████╗", "╚══════██║", "     ██╔╝", "    ██╔╝ ", "   ██╔╝  ", "   ╚═╝   "],
    "8": ["██████╗ ", "██╔══██╗", "╚█████╔╝", "██╔══██╗", "██████╔╝", "╚═════╝ "],
    "9": ["██████╗ ", "██╔══██╗", "╚██████║", "     ██║", "██████╔╝", "╚═════╝ "],
    " ": ["  ", "  ", "  ", "  ", "  ", "  "],
    "?": ["██████╗ ", "╚════██╗", " █████╔╝", " ╚═══╝  ", "   ██╗  ", "   ╚═╝  "],
    ".": ["   ", "   ", "   ", "   ", "   ", "██╗"],
    "!": ["██╗", "██║", "██║", "██║", "   ", "██╗"],
    "-": ["      ", "      ", "█████╗", "╚════╝", "      ", "      "],
}


def render_figlet(text: str) -> List[str]:
    rows = [""] * 6
    for ch in text.upper():
        art = FIGLET_FONT.get(ch, FIGLET_FONT["?"])
        for i in range(6):
            rows[i] += art[i]
    return rows


@novelty("figlet", "Display text in ASCII art", "figlet <text>")
def h_figlet(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [ok(c(row, Fore.BLUE)) for row in render_figlet(" ".join(args) or "DEV")]


@novelty("snake", "Play the snake arcade game")
def h_snake(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    ctx.emit("game:snake")
    return [ok("Launching snake... use the arrow keys, Esc to quit.")]


NOVELTY["game"] = Command("game", "Play the snake arcade game", "game", h_snake, "fun")


@novelty("weather", "Show weather (simulated)", "weather [city]")
def h_weather(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    city = args[0] if args else "Fes"
    return [
        out(),
        out(f"  Weather for {bold(city)}:"),
        out(),
        ok("    \\  /       Partly Cloudy"),
        ok(f"  _ /\"\".-.     {bold('22°C')}"),
        ok("    \\_(   ).   ↗ 12 km/h"),
        ok("    /(___(__)  10 km visibility"),
        out(),
        out("  Humidity: 45%  |  UV Index: 5"),
        out(),
    ]


JOKES = [
    "Why do programmers prefer dark mode? Because light attracts bugs!",
    "A SQL query walks into a bar, walks up to two tables and asks... 'Can I join you?'",
    "Why do Java developers wear glasses? Because they can't C#!",
    "There are only 10 types of people in the world: those who understand binary and those who don't.",
    "Why was the JavaScript developer sad? Because they didn't Node how to Express themselves!",
    "Why do programmers hate nature? It has too many bugs.",
    "['hip', 'hip'] // hip hip array!",
]

FORTUNES = [
    "The best time to plant a tree was 20 years ago. The second best time is now.",
    "Code is like humor. When you have to explain it, it's bad.",
    "First, solve the problem. Then, write the code.",
    "Experience is the name everyone gives to their mistakes.",
    "The only way to learn a new programming language is by writing programs in it.",
    "Simplicity is the soul of efficiency.",
    "Make it work, make it right, make it fast.",
]


@novelty("joke", "Tell a programming joke")
def h_joke(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [out(), out(f"  {RAND.choice(JOKES)}"), out()]


@novelty("fortune", "Display a random fortune")
def h_fortune(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [out(f"  {Style.DIM}{RAND.choice(FORTUNES)}{Style.RESET_ALL}")]


# ---------- fake system info ----------

@novelty("hostname", "Display hostname", category="system info")
def h_hostname(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [out(HOSTNAME)]


@novelty("uname", "System information", "uname [-a]", "system info")
def h_uname(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if "-a" in args:
        return [out(f"{PRODUCT}-OS 2.0.0 {HOSTNAME.split('.')[0]} x86_64 Next.js/14.1.0")]
    return [out(f"{PRODUCT}-OS")]


@novelty("df", "Disk space usage", "df [-h]", "system info")
def h_df(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [
        out(bold("Filesystem      Size  Used Avail Use% Mounted on")),
        out("/dev/sda1       500G  125G  375G  25% /"),
        out("/dev/sda2       100G   45G   55G  45% /home"),
        out("tmpfs           8.0G  1.2G  6.8G  15% /tmp"),
    ]


@novelty("free", "Memory usage", "free [-h]", "system info")
def h_free(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [
        out("              " + bold("total        used        free      shared  buff/cache   available")),
        out("Mem:          16Gi       4.2Gi       8.1Gi       512Mi       3.7Gi        11Gi"),
        out("Swap:         2.0Gi          0B       2.0Gi"),
    ]


@novelty("ps", "Process status", "ps [aux]", "system info")
def h_ps(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [
        out("  " + bold("PID TTY          TIME CMD")),
        out("    1 pts/0    00:00:00 next-server"),
        out("   42 pts/0    00:00:01 node"),
        out("  100 pts/0    00:00:00 typescript"),
        out("  256 pts/1    00:00:00 devterm-sh"),
    ]


@novelty("top", "System monitor", category="system info")
def h_top(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    user = ctx.env.get("USER", "guest").ljust(9)
    return [
        out("top - 10:30:00 up 42 days, load average: 0.42, 0.38, 0.35"),
        out("Tasks:  42 total,   1 running,  41 sleeping"),
        out("%Cpu(s):  5.2 us,  1.3 sy,  0.0 ni, 93.5 id"),
        out("MiB Mem :  16384.0 total,   8192.0 free,   4096.0 used"),
        out(),
        out("  " + bold("PID USER      PR  NI    VIRT    RES    SHR S  %CPU  %MEM     TIME+ COMMAND")),
        ok(f"    1 {user} 20   0  512000  64000  32000 S   2.0   0.4   0:42.00 next-server"),
        out(f"   42 {user} 20   0  256000  32000  16000 S   1.0   0.2   0:12.00 node"),
        out("[Press q to exit - simulated]"),
    ]


@novelty("exit", "Exit terminal", category="system info")
def h_exit(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    ctx.emit("session:exit")
    return [out("logout"), out("[Process completed]")]


# ---------- portfolio ----------

@novelty("about", "About this portfolio", category="portfolio")
def h_about(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    width = 59
    rule = "═" * width

    def row(text: str) -> str:
        return "║  " + text.ljust(width - 2) + "║"

    return [
        out(),
        ok(f"╔{rule}╗"),
        ok(row(f"{PRODUCT} Portfolio Terminal")),
        ok(f"╠{rule}╣"),
        out(row("Developer: Portfolio Dev")),
        out(row("Email: dev@devterm.local")),
        out(row(f"Version: {VERSION}")),
        ok(f"╚{rule}╝"),
        out(),
    ]


@novelty("skills", "List developer skills", category="portfolio")
def h_skills(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [
        out(f"  {bold('Technical Skills:')}"),
        ok(f"  ├── {c('Frontend')}: React, Next.js, TypeScript, Tailwind CSS"),
        ok(f"  ├── {c('Backend')}: Node.js, Express, Laravel, PHP"),
        ok(f"  ├── {c('Database')}: PostgreSQL, MongoDB, MySQL"),
        ok(f"  ├── {c('DevOps')}: Docker, Git, CI/CD, Linux"),
        ok(f"  └── {c('Tools')}: VS Code, Figma, Postman"),
    ]


SOCIAL_LINKS = {
    "github": "https://github.com/devterm",
    "linkedin": "https://linkedin.com/in/devterm",
    "email": "mailto:dev@devterm.local",
}


@novelty("contact", "Contact information", category="portfolio")
def h_contact(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [
        out(f"  {bold('Contact Information:')}"),
        out("  ─────────────────────"),
        ok("  Email:    dev@devterm.local"),
        ok("  GitHub:   github.com/devterm"),
        ok("  LinkedIn: linkedin.com/in/devterm"),
    ]


@novelty("projects", "List portfolio projects", category="portfolio")
def h_projects(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [
        out(f"  {bold('Featured Projects:')}"),
        out("  ─────────────────────"),
        ok(f"  [1] {bold('Portfolio v3.0')} - Next.js, TypeScript, Tailwind"),
        ok(f"  [2] {bold('E-Commerce Platform')} - React, Node.js, MongoDB"),
        ok(f"  [3] {bold('Task Manager')} - Laravel, Vue.js, PostgreSQL"),
        out('  Type "open README.md" for more details'),
    ]


@novelty("social", "Open social links", "social [github|linkedin|email]", "portfolio")
def h_social(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if args and args[0].lower() in SOCIAL_LINKS:
        ctx.emit(f"open:{SOCIAL_LINKS[args[0].lower()]}")
        return [ok(f"Opening {args[0]}... (simulated)")]
    return [
        out("Available social links:"),
        out(f"  social {c('github')}   - GitHub profile"),
        out(f"  social {c('linkedin')} - LinkedIn profile"),
        out(f"  social {c('email')}    - Send email"),
    ]


@novelty("theme", "Terminal theme info", category="portfolio")
def h_theme(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [
        out(f"  {bold('Design System:')}"),
        out("  ─────────────────────"),
        out("  Primary:   #E1E0DB (UI Stone)"),
        out("  Accent:    #26251E (Dark)"),
        out("  Canvas:    #FFFFFF (White)"),
        out("  Font:      Inter / JetBrains Mono"),
    ]


# fixed UTC offsets in hours; None means local time
WORLD_CLOCK = [("Local", None), ("UTC", 0), ("NYC", -5), ("Paris", 1), ("Tokyo", 9)]


@novelty("time", "Current time in different zones", category="portfolio")
def h_time(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    now = time.time()
    result = [out(f"  {bold('World Clock:')}")]
    for zone, offset in WORLD_CLOCK:
        stamp = time.localtime(now) if offset is None else time.gmtime(now + offset * 3600)
        result.append(out(f"  {c(zone.ljust(8))} {time.strftime('%H:%M:%S', stamp)}"))
    return result


@novelty("welcome", "Show welcome message", category="portfolio")
def h_welcome(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [
        out(f"{bold(PRODUCT + ' Terminal')} [Version {VERSION}]"),
        out("(c) 2025 Portfolio Dev"),
        ok(f'Ready. Type "{c("help")}" for commands.'),
    ]
