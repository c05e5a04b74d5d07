from __future__ import annotations

import typer

from .common import fail

COMMANDS = ("auth", "api", "repo", "pr", "pipeline", "wiki", "issue", "completion", "version")

BASH_SCRIPT = """_bb_complete() {
  local cur="${COMP_WORDS[COMP_CWORD]}"
  local cmds="%(cmds)s"
  COMPREPLY=($(compgen -W "${cmds}" -- "${cur}"))
}
complete -F _bb_complete bb"""

ZSH_SCRIPT = """#compdef bb
_arguments "1:command:(%(cmds)s)\""""

FISH_SCRIPT = """complete -c bb -f -a "%(cmds)s\""""

POWERSHELL_SCRIPT = """Register-ArgumentCompleter -CommandName bb -ScriptBlock {
  param($wordToComplete)
  %(quoted)s |
    Where-Object { $_ -like "$wordToComplete*" } |
    ForEach-Object { [System.Management.Automation.CompletionResult]::new($_, $_, 'ParameterValue', $_) }
}"""

SCRIPTS = {
    "bash": BASH_SCRIPT,
    "zsh": ZSH_SCRIPT,
    "fish": FISH_SCRIPT,
    "powershell": POWERSHELL_SCRIPT,
}


def completion_script(shell: str) -> str | None:
    template = SCRIPTS.get(shell.strip().lower())
    if template is None:
        return None
    return template % {
        "cmds": " ".join(COMMANDS),
        "quoted": ",".join(f'"{c}"' for c in COMMANDS),
    }


def completion(
        shell: str = typer.Argument(..., help="Shell: bash|zsh|fish|powershell."),
):
    """Print a shell completion script."""
    script = completion_script(shell)
    if script is None:
        fail(f"unsupported shell: {shell}")
    typer.echo(script)
