"""Core shell commands.

Every core command has an identifier in ``CommandId``; the ``builtin``
decorator fills ``BUILTINS`` and the command table refuses to start if an
identifier has no handler.  Handlers take ``(args, ctx)`` and return a list
of ``OutputLine``.  They report failures as error lines (or by raising a
``ShellError``, which the table converts) and never let anything else out.

Novelty commands live in ``devterm.novelty`` in a separate, open table.
"""

import ast
import math
import operator
import re
import time
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Union

from colorama import Fore, Style

from devterm.entities import Entity, File, Folder, VPath
from devterm.errors import (
    InvalidArgumentError,
    NotFoundError,
    SecurityRejectionError,
    TypeMismatchError,
)
from devterm.output import OutputLine, bold, c, err, lines, ok, out
from devterm.paths import all_entries, lookup, resolve
from devterm.search import compute_stats, format_search_results, format_stats, search_files

if TYPE_CHECKING:
    from devterm.shell import ShellContext

Handler = Callable[[List[str], "ShellContext"], List[OutputLine]]


class CommandId(str, Enum):
    HELP = "help"
    LS = "ls"
    CD = "cd"
    PWD = "pwd"
    TREE = "tree"
    FIND = "find"
    CAT = "cat"
    HEAD = "head"
    TAIL = "tail"
    WC = "wc"
    GREP = "grep"
    SEARCH = "search"
    STATS = "stats"
    OPEN = "open"
    TOUCH = "touch"
    MKDIR = "mkdir"
    RM = "rm"
    WHOAMI = "whoami"
    DATE = "date"
    UPTIME = "uptime"
    ENV = "env"
    EXPORT = "export"
    ECHO = "echo"
    ALIAS = "alias"
    HISTORY = "history"
    CLEAR = "clear"
    DMESG = "dmesg"
    NPM = "npm"
    NODE = "node"
    GIT = "git"
    CURL = "curl"
    PING = "ping"
    CALC = "calc"


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    usage: str
    execute: Handler
    category: str = "utilities"


BUILTINS: "OrderedDict[CommandId, Command]" = OrderedDict()


def builtin(cid: CommandId, description: str, usage: str, category: str) -> Callable[[Handler], Handler]:
    def register(fn: Handler) -> Handler:
        BUILTINS[cid] = Command(cid.value, description, usage, fn, category)
        return fn
    return register


def missing_builtins() -> List[CommandId]:
    return [cid for cid in CommandId if cid not in BUILTINS]


# ---------- helpers ----------

LONG_DATE = "Nov 25 10:30"
CALC_CHARS = re.compile(r"^[\d\s+\-*/().]+$")


def _display_name(item: Entity) -> str:
    if isinstance(item, Folder):
        return f"{Style.BRIGHT}{Fore.BLUE}{item.name}/{Style.RESET_ALL}"
    return f"{Fore.WHITE}{item.name}{Style.RESET_ALL}"


def _require_file(ctx: "ShellContext", name: str, cmd: str,
                  missing: str = "No such file") -> File:
    item = lookup(ctx.tree, resolve(ctx.cwd, name))
    if item is None:
        raise NotFoundError(f"{cmd}: {name}: {missing}")
    if isinstance(item, Folder):
        raise TypeMismatchError(f"{cmd}: {name}: Is a directory")
    return item


def _line_count(args: List[str], default: int = 10) -> int:
    """Value of ``-n N`` clamped at zero; missing or bad values give ``default``."""
    if "-n" not in args:
        return default
    idx = args.index("-n")
    try:
        return max(0, int(args[idx + 1]))
    except (IndexError, ValueError):
        return default


def _file_arg(args: List[str]) -> Optional[str]:
    skip = args.index("-n") + 1 if "-n" in args else -1
    return next((a for i, a in enumerate(args) if not a.startswith("-") and i != skip), None)


def _text_lines(content: str) -> List[OutputLine]:
    return lines(content.split("\n"))


# ---------- navigation ----------

@builtin(CommandId.HELP, "Show available commands", "help [command]", "system")
def h_help(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if args:
        cmd = ctx.commands.get(args[0])
        if cmd is None:
            return [err(f"Unknown command: {args[0]}")]
        return [
            out(f"  {bold(cmd.name)} - {cmd.description}"),
            out(f"  Usage: {c(cmd.usage)}"),
        ]
    result = [out(f"{bold('DEVTERM')} - Available Commands")]
    for category, cmds in ctx.commands.by_category().items():
        result.append(out(""))
        result.append(out(f"  {bold(category.upper())}"))
        for cmd in cmds:
            result.append(out(f"    {c(cmd.usage.ljust(26), Fore.YELLOW)}{cmd.description}"))
    result.append(out(""))
    result.append(out("  Shortcuts: Up/Down history | Tab autocomplete | Ctrl+L clear"))
    return result


@builtin(CommandId.LS, "List directory contents", "ls [-la] [path]", "navigation")
def h_ls(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    flags = "".join(a.lstrip("-") for a in args if a.startswith("-"))
    show_all = "a" in flags
    show_long = "l" in flags
    path_arg = next((a for a in args if not a.startswith("-")), None)
    target = resolve(ctx.cwd, path_arg) if path_arg else ctx.cwd

    item = lookup(ctx.tree, target)
    if item is None:
        return [err(f"ls: cannot access '{path_arg or target}': No such file or directory")]
    if isinstance(item, File):
        return [out(item.name)]

    entries = item.children if show_all else [i for i in item.children if not i.name.startswith(".")]
    if show_long:
        owner = ctx.env.get("USER", "guest")
        result = [out(f"total {len(entries)}")]
        for entry in entries:
            if isinstance(entry, Folder):
                perms, size = "drwxr-xr-x", 4096
            else:
                perms, size = "-rw-r--r--", len(entry.content)
            result.append(out(f"{perms}  1 {owner} {owner} {size:>6} {LONG_DATE} {_display_name(entry)}"))
        return result
    if not entries:
        return []
    return [out("  ".join(_display_name(e) for e in entries))]


@builtin(CommandId.CD, "Change directory", "cd <directory>", "navigation")
def h_cd(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if not args or args[0] == "~":
        ctx.cwd = "/"
        return [ok("~")]
    new_path = resolve(ctx.cwd, args[0])
    item = lookup(ctx.tree, new_path)
    if item is None:
        return [err(f"cd: no such file or directory: {args[0]}")]
    if not isinstance(item, Folder):
        return [err(f"cd: not a directory: {args[0]}")]
    ctx.cwd = new_path
    return []


@builtin(CommandId.PWD, "Print working directory", "pwd", "navigation")
def h_pwd(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [out(ctx.cwd)]


@builtin(CommandId.TREE, "Display directory tree", "tree [path] [--depth N]", "navigation")
def h_tree(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    """Draw the tree below a directory.

    Only ``--depth`` levels are drawn (default 3) but the closing summary
    counts the whole subtree.
    """
    max_depth = 3
    depth_value = -1
    if "--depth" in args:
        depth_value = args.index("--depth") + 1
        try:
            max_depth = int(args[depth_value]) or 3
        except (IndexError, ValueError):
            max_depth = 3
    path_arg = next((a for i, a in enumerate(args) if not a.startswith("-") and i != depth_value), None)
    target = resolve(ctx.cwd, path_arg) if path_arg else ctx.cwd

    item = lookup(ctx.tree, target)
    if item is None:
        return [err(f"tree: {path_arg}: No such file or directory")]
    if isinstance(item, File):
        return [out(item.name)]

    result = [out(target)]

    def draw(items: List[Entity], prefix: str, depth: int) -> None:
        for idx, node in enumerate(items):
            last = idx == len(items) - 1
            connector = "└── " if last else "├── "
            kind = ok if isinstance(node, Folder) else out
            result.append(kind(f"{prefix}{connector}{_display_name(node)}"))
            if isinstance(node, Folder) and depth < max_depth:
                draw(node.children, prefix + ("    " if last else "│   "), depth + 1)

    draw(item.children, "", 1)
    entries = all_entries(item.children)
    dirs = sum(1 for _, e in entries if isinstance(e, Folder))
    result.append(out(""))
    result.append(ok(f"{dirs} directories, {len(entries) - dirs} files"))
    return result


@builtin(CommandId.FIND, "Search for files", "find <pattern>", "navigation")
def h_find(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if not args:
        return [err("Usage: find <pattern>")]
    pattern = args[0].lower()
    matches = [p for p, e in all_entries(ctx.tree) if pattern in e.name.lower()]
    if not matches:
        return [out(f"No files matching '{args[0]}' found")]
    return [ok(f"./{p}") for p in matches]


# ---------- file inspection ----------

@builtin(CommandId.CAT, "Display file contents", "cat <file>", "files")
def h_cat(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if not args:
        return [err("Usage: cat <file>")]
    file = _require_file(ctx, args[0], "cat", "No such file or directory")
    return _text_lines(file.content)


@builtin(CommandId.HEAD, "Show first lines of file", "head [-n N] <file>", "files")
def h_head(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    count = _line_count(args)
    name = _file_arg(args)
    if not name:
        return [err("Usage: head [-n N] <file>")]
    file = _require_file(ctx, name, "head")
    return lines(file.content.split("\n")[:count])


@builtin(CommandId.TAIL, "Show last lines of file", "tail [-n N] <file>", "files")
def h_tail(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    count = _line_count(args)
    name = _file_arg(args)
    if not name:
        return [err("Usage: tail [-n N] <file>")]
    file = _require_file(ctx, name, "tail")
    all_lines = file.content.split("\n")
    return lines(all_lines[max(0, len(all_lines) - count):])


@builtin(CommandId.WC, "Word, line, character count", "wc <file>", "files")
def h_wc(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if not args:
        return [err("Usage: wc <file>")]
    content = _require_file(ctx, args[0], "wc").content
    return [out(f"  {len(content.split(chr(10)))}  {len(content.split())}  {len(content)} {args[0]}")]


@builtin(CommandId.GREP, "Search pattern in file", "grep <pattern> <file>", "files")
def h_grep(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    """Case-insensitive line match inside one file.

    A pattern that is not a valid regular expression is matched literally.
    """
    if len(args) < 2:
        return [err("Usage: grep <pattern> <file>")]
    pattern, name = args[0].strip("\"'"), args[1]
    file = _require_file(ctx, name, "grep")
    try:
        regex = re.compile(pattern, re.IGNORECASE)
    except re.error:
        regex = re.compile(re.escape(pattern), re.IGNORECASE)

    def highlight(m: "re.Match[str]") -> str:
        return f"{Fore.RED}{Style.BRIGHT}{m.group(0)}{Style.RESET_ALL}"

    result = []
    for idx, line in enumerate(file.content.split("\n"), start=1):
        if regex.search(line):
            result.append(ok(f"{Fore.LIGHTBLACK_EX}{idx}:{Style.RESET_ALL} {regex.sub(highlight, line)}"))
    if not result:
        return [out(f"No matches found for '{pattern}'")]
    return result


@builtin(CommandId.SEARCH, "Search text in all files",
         "search <query> [--case] [--word] [--regex] [--max N] [--summary]", "files")
def h_search(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    options: Dict[str, Union[bool, int]] = {}
    words: List[str] = []
    summary = False
    i = 0
    while i < len(args):
        a = args[i]
        if a == "--case":
            options["case_sensitive"] = True
        elif a == "--word":
            options["whole_word"] = True
        elif a == "--regex":
            options["regex"] = True
        elif a == "--summary":
            summary = True
        elif a == "--max":
            try:
                options["max_results"] = int(args[i + 1])
            except (IndexError, ValueError):
                raise InvalidArgumentError("search: --max expects a number")
            i += 1
        else:
            words.append(a)
        i += 1
    query = " ".join(words).strip("\"'")
    if not query:
        return [err("Usage: search <query> [--case] [--word] [--regex] [--max N] [--summary]")]

    results = search_files(ctx.files, query, **options)
    if summary:
        return lines(format_search_results(results, query).split("\n"))
    if not results:
        return [out(f'No results for "{query}"')]
    produced = [ok(f"{c(r.file_path, Fore.MAGENTA)}:{r.line}:{r.column}: {r.content}") for r in results]
    produced.append(out(f"{len(results)} result(s) for \"{query}\""))
    return produced


@builtin(CommandId.STATS, "Project statistics", "stats", "dev tools")
def h_stats(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return lines(format_stats(compute_stats(ctx.files)))


@builtin(CommandId.OPEN, "Open file in editor", "open <file>", "files")
def h_open(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if not args:
        return [err("Usage: open <file>")]
    opened = ctx.open_file(str(VPath.parse(resolve(ctx.cwd, args[0])))) or ctx.open_file(args[0])
    if opened:
        return [ok(f"Opened {opened}")]
    return [err(f"File not found: {args[0]}")]


# ---------- mutation ----------

@builtin(CommandId.TOUCH, "Create an empty file", "touch <file>", "files")
def h_touch(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if not args:
        return [err("Usage: touch <file>")]
    for name in args:
        path = VPath.parse(resolve(ctx.cwd, name))
        existing = lookup(ctx.tree, path.absolute)
        if isinstance(existing, File):
            continue
        if isinstance(existing, Folder):
            raise TypeMismatchError(f"touch: {name}: Is a directory")
        if not isinstance(lookup(ctx.tree, path.parent.absolute), Folder):
            raise NotFoundError(f"touch: cannot touch '{name}': No such file or directory")
        if ctx.fs.create_file(str(path), "") is None:
            return [err(f"touch: cannot touch '{name}'")]
    return []


@builtin(CommandId.MKDIR, "Create a directory", "mkdir [-p] <dir>", "files")
def h_mkdir(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    parents = "-p" in args
    names = [a for a in args if not a.startswith("-")]
    if not names:
        return [err("Usage: mkdir [-p] <dir>")]
    result: List[OutputLine] = []
    for name in names:
        path = VPath.parse(resolve(ctx.cwd, name))
        existing = lookup(ctx.tree, path.absolute)
        if existing is not None:
            if not (parents and isinstance(existing, Folder)):
                result.append(err(f"mkdir: cannot create directory '{name}': File exists"))
            continue
        if not parents and not isinstance(lookup(ctx.tree, path.parent.absolute), Folder):
            result.append(err(f"mkdir: cannot create directory '{name}': No such file or directory"))
            continue
        if not ctx.fs.create_folder(str(path)):
            result.append(err(f"mkdir: cannot create directory '{name}': Not a directory"))
    return result


@builtin(CommandId.RM, "Remove files or directories", "rm [-r] <path>", "files")
def h_rm(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    recursive = any(a.startswith("-") and "r" in a.lower() for a in args)
    names = [a for a in args if not a.startswith("-")]
    if not names:
        return [err("Usage: rm [-r] <path>")]
    result: List[OutputLine] = []
    for name in names:
        path = VPath.parse(resolve(ctx.cwd, name))
        if path.is_root:
            result.append(err("rm: refusing to remove '/'"))
            continue
        item = lookup(ctx.tree, path.absolute)
        if item is None:
            result.append(err(f"rm: cannot remove '{name}': No such file or directory"))
        elif isinstance(item, Folder):
            if not recursive:
                result.append(err(f"rm: cannot remove '{name}': Is a directory"))
                continue
            ctx.fs.delete_folder(str(path))
            if VPath.parse(ctx.cwd).is_within(path):
                ctx.cwd = path.parent.absolute
        else:
            ctx.fs.delete_file(str(path))
    return result


# ---------- environment and session ----------

@builtin(CommandId.WHOAMI, "Display current user", "whoami", "system")
def h_whoami(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [out(ctx.env.get("USER") or "guest")]


@builtin(CommandId.DATE, "Display current date and time", "date", "system")
def h_date(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [out(time.strftime("%a, %b %d, %Y, %H:%M:%S"))]


@builtin(CommandId.UPTIME, "Show session uptime", "uptime", "system")
def h_uptime(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    elapsed = int(time.time() - ctx.started)
    hours, mins = elapsed // 3600, (elapsed % 3600) // 60
    return [out(f" {time.strftime('%H:%M:%S')} up {hours}:{mins:02d}, 1 user, "
                f"load average: 0.42, 0.38, 0.35")]


@builtin(CommandId.ENV, "Display environment variables", "env", "system")
def h_env(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [out(f"{bold(k)}={v}") for k, v in ctx.env.items()]


@builtin(CommandId.EXPORT, "Set environment variable", "export KEY=VALUE", "system")
def h_export(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    match = re.match(r"^(\w+)=(.*)$", " ".join(args))
    if not match:
        return [err("Usage: export KEY=VALUE")]
    ctx.set_env(match.group(1), match.group(2))
    return [ok(f"Set {match.group(1)}={match.group(2)}")]


@builtin(CommandId.ECHO, "Print text to terminal", "echo <text>", "system")
def h_echo(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    text = re.sub(r"\$(\w+)", lambda m: ctx.env.get(m.group(1), ""), " ".join(args))
    return [out(text)]


@builtin(CommandId.ALIAS, "Manage command aliases", "alias [name=command]", "system")
def h_alias(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if not args:
        return [out(f"alias {c(name)}='{cmd}'") for name, cmd in ctx.aliases.items()]
    match = re.match(r"^([\w.-]+)=(.+)$", " ".join(args))
    if not match:
        return [err("Usage: alias name=command")]
    command = re.sub(r"^['\"]|['\"]$", "", match.group(2))
    ctx.set_alias(match.group(1), command)
    return [ok(f"Alias: {match.group(1)} = {command}")]


@builtin(CommandId.HISTORY, "Show command history", "history", "system")
def h_history(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    return [out(f"  {Fore.LIGHTBLACK_EX}{i:>4}{Style.RESET_ALL}  {cmd}")
            for i, cmd in enumerate(ctx.history, start=1)]


@builtin(CommandId.CLEAR, "Clear terminal screen", "clear", "system")
def h_clear(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    # the session intercepts clear/cls before dispatch
    return []


@builtin(CommandId.DMESG, "Show captured console messages", "dmesg", "system")
def h_dmesg(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if not ctx.console.messages:
        return [out("(no messages)")]
    colours = {"error": Fore.RED, "warn": Fore.YELLOW, "debug": Fore.LIGHTBLACK_EX}
    result = []
    for msg in ctx.console.messages:
        suffix = f" (x{msg.count})" if msg.count > 1 else ""
        stamp = time.strftime("%H:%M:%S", time.localtime(msg.timestamp))
        result.append(out(f"[{stamp}] {c(msg.kind.ljust(5), colours.get(msg.kind, Fore.CYAN))} {msg.content}{suffix}"))
    return result


# ---------- package manager and VCS simulation ----------

_NPM_SCRIPTS: Dict[str, List[OutputLine]] = {
    "start": [
        out("> portfolio-v3@3.0.2 start"),
        out("> next start"),
        ok(f"  {bold('Next.js 14.1.0')}"),
        out(f"  - Local:        {c('http://localhost:3000')}"),
        out(f"  - Network:      {c('http://192.168.1.100:3000')}"),
        ok(f"  {c('Ready in 1.2s', Fore.GREEN)}"),
    ],
    "dev": [
        out("> portfolio-v3@3.0.2 dev"),
        out("> next dev --turbo"),
        ok(f"  {bold('Next.js 15.0.0 (Turbopack)')}"),
        out(f"  - Local:        {c('http://localhost:3000')}"),
        ok(f"  {c('Ready in 0.8s', Fore.GREEN)} {c('(Turbopack enabled)', Fore.LIGHTBLACK_EX)}"),
    ],
    "build": [
        out("> portfolio-v3@3.0.2 build"),
        out("> next build"),
        out("  Creating an optimized production build..."),
        ok("  Compiled successfully"),
        ok("  Linting and checking validity of types"),
        ok("  Collecting page data"),
        ok("  Generating static pages (5/5)"),
        ok("  Finalizing page optimization"),
        out(""),
        out("Route (app)                              Size     First Load JS"),
        out(f"  {c('┌', Fore.GREEN)} /                                      5.2 kB        89.2 kB"),
        out(f"  {c('├', Fore.GREEN)} /about                                 2.1 kB        86.1 kB"),
        out(f"  {c('└', Fore.GREEN)} /contact                               3.4 kB        87.4 kB"),
        ok(f"  {c('Build completed in 8.4s', Fore.GREEN)}"),
    ],
    "test": [
        out("> portfolio-v3@3.0.2 test"),
        out("> vitest --run"),
        ok(f"  {c('PASS', Fore.GREEN)} src/__tests__/components/Button.test.tsx (3 tests) 45ms"),
        ok(f"  {c('PASS', Fore.GREEN)} src/__tests__/hooks/useLocalStorage.test.ts (5 tests) 23ms"),
        ok(f"  {c('PASS', Fore.GREEN)} src/__tests__/lib/utils.test.ts (4 tests) 12ms"),
        ok(f"  {bold('Test Files  3 passed')} (3)"),
        ok(f"  {bold('Tests       12 passed')} (12)"),
        out("  Duration    1.24s"),
    ],
    "drink:coffee": [
        out("> portfolio-v3@3.0.2 drink:coffee"),
        out("> brew install caffeine"),
        out(f"  {c('Brewing...', Fore.YELLOW)}"),
        out("  [##########] 100%"),
        ok(f"  {c('Success!', Fore.GREEN)} Energy levels restored."),
        out(f"  {c('Code quality increased by 50%', Fore.BLUE)}"),
    ],
    "solve:problem": [
        out("> portfolio-v3@3.0.2 solve:problem"),
        out("> node ./brain/solve.js"),
        out(f"  {c('Analyzing complexity...', Fore.MAGENTA)}"),
        out("  Optimizing algorithms..."),
        ok(f"  {c('Solution found!', Fore.GREEN)}"),
        out("  Output: Simple, scalable, and robust code."),
    ],
    "design:ui": [
        out("> portfolio-v3@3.0.2 design:ui"),
        out("> figma --open"),
        out(f"  {c('Launching creative kernel...')}"),
        out("  Aligning pixels..."),
        ok(f"  {c('Interface rendered.', Fore.GREEN)}"),
        out("  Aesthetic: Minimalist Industrial."),
    ],
}


@builtin(CommandId.NPM, "NPM package manager (simulated)", "npm <command>", "dev tools")
def h_npm(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    sub = args[0] if args else ""
    script = args[1] if sub == "run" and len(args) > 1 else sub
    if script in _NPM_SCRIPTS:
        return list(_NPM_SCRIPTS[script])
    if script in ("install", "i"):
        pkg = args[1] if len(args) > 1 else ""
        if pkg:
            return [
                out("added 1 package in 2.3s"),
                ok(f"+ {pkg}@latest"),
                out("added 1 package, and audited 342 packages in 3s"),
                ok(c("found 0 vulnerabilities", Fore.GREEN)),
            ]
        return [
            out("added 341 packages in 8.2s"),
            ok("341 packages are looking for funding"),
            out("  run `npm fund` for details"),
            ok(c("found 0 vulnerabilities", Fore.GREEN)),
        ]
    if script in ("-v", "--version"):
        return [out(ctx.env.get("NPM_VERSION", "10.2.3"))]
    if sub == "run":
        return [err(f"npm run: script '{args[1] if len(args) > 1 else ''}' not found")]
    return [err(f"npm: '{sub}' is not a npm command. See 'npm help'.")]


_ARITH_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Pow: operator.pow,
}
_UNARY_OPS = {ast.UAdd: operator.pos, ast.USub: operator.neg}


# largest magnitude any step of an arithmetic expression may reach
RESULT_LIMIT = 1e308


def _checked(value: Union[int, float, complex]) -> Union[int, float]:
    if isinstance(value, complex):
        raise InvalidArgumentError("Result is not a real number")
    if abs(value) > RESULT_LIMIT:
        raise InvalidArgumentError("Result too large")
    return value


def _eval_node(node: ast.AST) -> Union[int, float]:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return _checked(node.value)
    if isinstance(node, ast.BinOp) and type(node.op) in _ARITH_OPS:
        left, right = _eval_node(node.left), _eval_node(node.right)
        if isinstance(node.op, ast.Pow):
            if abs(right) > 100:
                raise InvalidArgumentError("Exponent too large")
            if abs(left) > 1 and right * math.log10(abs(left)) > math.log10(RESULT_LIMIT):
                raise InvalidArgumentError("Result too large")
        return _checked(_ARITH_OPS[type(node.op)](left, right))
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    raise InvalidArgumentError("Invalid expression")


def evaluate_arithmetic(expr: str) -> Union[int, float]:
    """Evaluate a numeric expression after checking its character set.

    Only digits, whitespace, ``+ - * / ( ) .`` are accepted; anything else
    is refused before parsing.  Evaluation walks the parsed tree and never
    reaches ``eval``.
    """
    if not CALC_CHARS.match(expr):
        raise SecurityRejectionError("Invalid expression. Only numbers and +, -, *, /, (, ) allowed.")
    try:
        tree = ast.parse(expr.strip(), mode="eval")
    except (SyntaxError, ValueError):
        raise InvalidArgumentError("Invalid expression")
    try:
        return _eval_node(tree)
    except (ZeroDivisionError, OverflowError) as e:
        raise InvalidArgumentError(f"Error evaluating expression: {e}")


def format_number(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return str(value)


@builtin(CommandId.NODE, "Node.js runtime (simulated)", "node [-v | -e \"code\"]", "dev tools")
def h_node(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    version = ctx.env.get("NODE_VERSION", "20.10.0")
    if args and args[0] in ("-v", "--version"):
        return [out(f"v{version}")]
    if len(args) > 1 and args[0] == "-e":
        code = re.sub(r"^[\"']|[\"']$", "", " ".join(args[1:]))
        if CALC_CHARS.match(code):
            try:
                return [out(format_number(evaluate_arithmetic(code)))]
            except InvalidArgumentError:
                return [err("SyntaxError: Invalid expression")]
        match = re.match(r"console\.log\((.+)\)", code)
        if match:
            return [out(re.sub(r"^[\"']|[\"']$", "", match.group(1)))]
        return [out("undefined")]
    return [
        out(f"Welcome to Node.js v{version}."),
        out('Type ".help" for more information.'),
        out("> (Interactive mode not available in demo)"),
    ]


@builtin(CommandId.GIT, "Git version control (simulated)", "git <command>", "dev tools")
def h_git(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    sub = args[0] if args else ""
    if sub == "status":
        modified = ctx.fs.journal.modified
        changed = sorted(str(p) for p in modified) or ["src/app.ts"]
        return [out(f"On branch {bold('main')}"), out("Your branch is up to date with 'origin/main'."),
                out(""), ok("Changes not staged for commit:"),
                out('  (use "git add <file>..." to update what will be committed)')] + \
            [err(f"        {c('modified:   ' + name, Fore.RED)}") for name in changed] + \
            [out(""), out('no changes added to commit (use "git add" and/or "git commit -a")')]
    if sub == "log":
        return [
            out(c("commit a1b2c3d4e5f6a7b8c9d0e1f2a3b4c5d6e7f8a9b0", Fore.YELLOW)),
            out("Author: Portfolio Dev <dev@devterm.local>"),
            out("Date:   Mon Nov 25 2025 10:30:00"),
            out(""),
            out("    feat: enhance terminal with advanced features"),
            out(""),
            out(c("commit b2c3d4e5f6a7b8c9d0e1f2a3b4c5d6e7f8a9b0c1", Fore.YELLOW)),
            out("Author: Portfolio Dev <dev@devterm.local>"),
            out("Date:   Sun Nov 24 2025 18:45:00"),
            out(""),
            out("    refactor: improve code window components"),
        ]
    if sub == "branch":
        return [ok(c("* main", Fore.GREEN)), out("  develop"), out("  feature/terminal-v2")]
    if sub == "diff":
        return [
            out(bold("diff --git a/src/app.ts b/src/app.ts")),
            out("index a1b2c3d..e4f5a6b 100644"),
            out("--- a/src/app.ts"),
            out("+++ b/src/app.ts"),
            out(c("@@ -1,5 +1,10 @@")),
            err(c("-// Old terminal implementation", Fore.RED)),
            ok(c("+// Enhanced terminal with advanced features", Fore.GREEN)),
            ok(c("+// Supports: history, autocomplete, aliases", Fore.GREEN)),
        ]
    if sub in ("--version", "-v"):
        return [out("git version 2.43.0")]
    return [err(f"git: '{sub}' is not a git command. See 'git --help'.")]


@builtin(CommandId.CURL, "Transfer data from URL (simulated)", "curl <url>", "dev tools")
def h_curl(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if not args:
        return [err("Usage: curl <url>")]
    return [
        out("  % Total    % Received % Xferd  Average Speed   Time    Time     Time  Current"),
        out("                                 Dload  Upload   Total   Spent    Left  Speed"),
        ok("100  1256  100  1256    0     0  12560      0 --:--:-- --:--:-- --:--:-- 12560"),
        out(""),
        out(c("<!DOCTYPE html>")),
        out('<html lang="en">'),
        out(f"<head><title>{args[0]}</title></head>"),
        out("<body>...</body>"),
        out("</html>"),
    ]


_PING_TIMES = ("14.2", "21.7", "12.9", "33.4")


@builtin(CommandId.PING, "Ping a host (simulated)", "ping <host>", "dev tools")
def h_ping(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    if not args:
        return [err("Usage: ping <host>")]
    host = args[0]
    result = [out(f"PING {host} (93.184.216.34): 56 data bytes")]
    for seq, ms in enumerate(_PING_TIMES):
        result.append(ok(f"64 bytes from 93.184.216.34: icmp_seq={seq} ttl=56 time={ms} ms"))
    result.append(out(""))
    result.append(out(f"--- {host} ping statistics ---"))
    result.append(out("4 packets transmitted, 4 packets received, 0.0% packet loss"))
    return result


@builtin(CommandId.CALC, "Simple calculator", "calc <expression>", "utilities")
def h_calc(args: List[str], ctx: "ShellContext") -> List[OutputLine]:
    expr = "".join(args)
    if not expr:
        return [err("Usage: calc <expression> (e.g., calc 2+2*3)")]
    value = evaluate_arithmetic(expr)
    return [ok(f"= {bold(format_number(value))}")]


