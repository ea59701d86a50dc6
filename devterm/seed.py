"""Default base tree shown when no configuration supplies one."""

from typing import List

from devterm.entities import Entity, File, Folder

README = """# devterm

An in-memory developer terminal.

## Try it
- `ls -la` to look around
- `cat docs/about.md`
- `search TODO`
"""

PACKAGE_JSON = """{
  "name": "portfolio-v3",
  "version": "3.0.2",
  "private": true,
  "scripts": {
    "dev": "next dev --turbo",
    "build": "next build",
    "start": "next start",
    "test": "vitest --run"
  }
}
"""

APP_TS = """import { render } from './lib/render';

// TODO: lazy-load the terminal panel
export function main(): void {
  render(document.getElementById('root'));
}
"""

RENDER_TS = """export function render(node: HTMLElement | null): void {
  if (!node) return;
  node.textContent = 'Hello from React';
}
"""

ABOUT_MD = """# About

Full-stack developer working with Next.js, Node and Tailwind.
"""

GITIGNORE = """node_modules
.next
"""

DEFAULT_TREE: List[Entity] = [
    File(name="README.md", type="markdown", content=README),
    File(name="package.json", type="json", content=PACKAGE_JSON),
    File(name=".gitignore", type="markdown", content=GITIGNORE),
    Folder(name="src", is_open=True, children=[
        File(name="app.ts", type="typescript", content=APP_TS),
        Folder(name="lib", children=[
            File(name="render.ts", type="typescript", content=RENDER_TS),
        ]),
    ]),
    Folder(name="docs", children=[
        File(name="about.md", type="markdown", content=ABOUT_MD),
    ]),
]
