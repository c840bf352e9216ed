"""Lightweight health check for the Tavern bot.

Run: python scripts/health_check.py [--strict] [--json] [--offline]

Checks performed:
1. Dependency presence (discord, dotenv, requests).
2. Repository configuration in effect (owner, repo, file, branch).
3. GitHub token presence in the credential slot (never prompts, never prints it).
4. Unless --offline: fetch the character file and sanity-check it
   (present and unique ids, non-negative XP, stored level matching the XP table).

Outputs a summary; with --json emits machine-readable JSON.
Exit code: 0 unless --strict given and any failures occur.
"""
from __future__ import annotations
import json, sys, argparse, importlib, traceback
from pathlib import Path
from typing import Any, Dict

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

Result = Dict[str, Any]

def _check_import(module_name: str) -> tuple[bool, str]:
    try:
        importlib.import_module(module_name)
        return True, 'ok'
    except ImportError as e:
        return False, f'{e.__class__.__name__}: {e}'

def check_dependencies() -> Result:
    deps = {}
    for mod in ['discord', 'dotenv', 'requests']:
        ok, msg = _check_import(mod)
        deps[mod] = {'present': ok, 'detail': msg}
    return {'dependencies': deps}

def check_config() -> Result:
    from core import config  # type: ignore
    return {'config': {
        'repo': f'{config.REPO_OWNER}/{config.REPO_NAME}',
        'file': config.FILE_PATH,
        'branch': config.REPO_BRANCH or '(default)',
        'api': config.GITHUB_API_BASE,
        'credential_file': config.CREDENTIAL_FILE,
        'credential_slot': config.CREDENTIAL_SLOT,
    }}

def check_credential() -> Result:
    from core.credentials import get_store  # type: ignore
    return {'credential': {'present': bool(get_store().peek())}}

def scan_characters(roster) -> list[str]:
    from modules.progression import level_for
    issues = []
    seen: set[int] = set()
    for c in roster.characters:
        if c.id <= 0:
            issues.append(f'{c.name}: missing or invalid id')
        elif c.id in seen:
            issues.append(f'{c.name}: duplicate id {c.id}')
        seen.add(c.id)
        if c.exp < 0:
            issues.append(f'{c.name}: negative exp {c.exp}')
        expected = level_for(c.exp)
        if c.level != expected:
            issues.append(f'{c.name}: level {c.level} but exp {c.exp} means level {expected}')
        if not c.name.strip() or not c.char_class.strip():
            issues.append(f'{c.id}: missing name or class')
    return issues

def check_remote() -> Result:
    from storage.github import ContentsClient
    from storage.exceptions import RepositoryError
    from core.credentials import get_store  # type: ignore
    client = ContentsClient(token_provider=get_store().peek)
    try:
        roster = client.fetch_file()
    except RepositoryError as e:
        return {'remote': {'ok': False, 'status': e.status, 'detail': str(e)}}
    return {'remote': {
        'ok': True,
        'sha': roster.version,
        'count': len(roster.characters),
        'issues': scan_characters(roster),
    }}

def summarize(results: Dict[str, Any]) -> str:
    lines = []
    deps = results.get('dependencies', {})
    if deps:
        lines.append('Dependencies:')
        for k, v in deps.items():
            lines.append(f'  - {k}: {"OK" if v.get("present") else "MISSING"} ({v.get("detail")})')
    cfg = results.get('config', {})
    if cfg:
        lines.append('Config:')
        for k, v in cfg.items():
            lines.append(f'  - {k}: {v}')
    cred = results.get('credential')
    if cred is not None:
        lines.append(f"Credential: {'present' if cred.get('present') else 'MISSING'}")
    remote = results.get('remote')
    if remote is not None:
        if not remote.get('ok'):
            lines.append(f"Remote: FAIL ({remote.get('detail')})")
        else:
            lines.append(f"Remote: OK sha={remote.get('sha')} characters={remote.get('count')}")
            for i in remote.get('issues', [])[:50]:
                lines.append(f'    - {i}')
            extra = max(0, len(remote.get('issues', [])) - 50)
            if extra:
                lines.append(f'    … {extra} more')
    return "\n".join(lines)

def main(argv=None):
    ap = argparse.ArgumentParser(description='Tavern bot health check')
    ap.add_argument('--strict', action='store_true', help='Exit non-zero on any failures')
    ap.add_argument('--json', action='store_true', help='Emit JSON instead of text summary')
    ap.add_argument('--offline', action='store_true', help='Skip fetching the character file')
    args = ap.parse_args(argv)
    results: Dict[str, Any] = {}
    try:
        results.update(check_dependencies())
        results.update(check_config())
        results.update(check_credential())
        if not args.offline and results['credential']['present']:
            results.update(check_remote())
    except Exception:
        results['fatal'] = traceback.format_exc()
    if args.json:
        print(json.dumps(results, indent=2))
    else:
        print(summarize(results))
        if 'fatal' in results:
            print('\nFatal error:\n' + results['fatal'])
    if args.strict:
        failures = []
        for mod, v in results.get('dependencies', {}).items():
            if not v.get('present'): failures.append(f'dep:{mod}')
        if not results.get('credential', {}).get('present'): failures.append('credential')
        remote = results.get('remote')
        if remote is not None and (not remote.get('ok') or remote.get('issues')): failures.append('remote')
        if failures or 'fatal' in results:
            sys.exit(1)
    sys.exit(0)

if __name__ == '__main__':
    main()
