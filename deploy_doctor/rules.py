"""Ordered rule table for Netlify build error classification.

Rules are evaluated top to bottom and the FIRST matching rule wins. There is no
scoring and no tie-breaking beyond position in this list: when realistic error
text could match two rules, the rule listed earlier decides. Families appear in
this order:

1. dependency / package-manager failures
2. build command not found
3. environment / runtime version mismatches
4. filesystem and path errors (including case-sensitivity pitfalls)
5. memory limit exhaustion
6. network and timeout failures
7. type-checking failures
8. framework build failures
9. lint failures

Patterns are regular expressions searched case-insensitively.
"""

from typing import List

from .models import ErrorRule

ERROR_RULES: List[ErrorRule] = [
    ErrorRule(
        pattern=(
            r"npm.*err.*peer dep|eresolve|could not resolve dependency"
            r"|conflicting peer dependency|unable to resolve dependency tree"
        ),
        category="Dependency Conflict",
        description="Package versions required by the project cannot be installed together.",
        severity="high",
        estimated_cost_minutes=2,
        common_causes=["Peer dependency version mismatch", "Package.json conflicts"],
        quick_fixes=["npm install --legacy-peer-deps", "Update conflicting packages"],
        prevention_tips=["Regular dependency audits", "Lock file maintenance"],
    ),
    ErrorRule(
        pattern=(
            r"npm err!.*(e404|404 not found)|yarn.*error.*(couldn't find|integrity|lockfile)"
            r"|err_pnpm|lockfile.*(outdated|out of date|needs to be updated)"
            r"|error during dependency installation|stage 'install dependencies'"
        ),
        category="Dependency Installation Failed",
        description="The package manager could not install the project's dependencies.",
        severity="high",
        estimated_cost_minutes=2,
        common_causes=[
            "Package or version missing from the registry",
            "Lock file out of sync with package.json",
            "Private package without registry credentials",
        ],
        quick_fixes=[
            "Regenerate the lock file and commit it",
            "Verify package names and versions",
            "Add registry credentials as environment variables",
        ],
        prevention_tips=["Commit lock files", "Run a clean install locally before pushing"],
    ),
    ErrorRule(
        pattern=(
            r"command not found|: not found|is not recognized as an internal or external command"
            r"|spawn \S+ enoent|missing script"
        ),
        category="Build Tool Missing",
        description="The build command refers to a program or script that does not exist.",
        severity="high",
        estimated_cost_minutes=1,
        common_causes=["Missing build dependencies", "Incorrect build command"],
        quick_fixes=["Update package.json scripts", "Install missing dependencies"],
        prevention_tips=["Verify build commands locally", "Document build requirements"],
    ),
    ErrorRule(
        pattern=(
            r"unsupported engine|engine \"\w+\" is incompatible|requires node"
            r"|node(\.js)? version|node_version|python version|ruby version"
            r"|go version|unsupported (node|runtime)"
        ),
        category="Runtime Version Mismatch",
        description="The build image runs a different language runtime version than the project needs.",
        severity="high",
        estimated_cost_minutes=1,
        common_causes=[
            "NODE_VERSION not pinned in the build environment",
            "Dependency requires a newer runtime",
        ],
        quick_fixes=[
            "Set NODE_VERSION (or .nvmrc) to the version used locally",
            "Pin runtime versions in netlify.toml",
        ],
        prevention_tips=["Keep local and build runtimes in sync", "Declare engines in package.json"],
    ),
    ErrorRule(
        pattern=(
            r"enoent|no such file or directory|cannot find module|module not found"
            r"|can't resolve|case[- ]sensitiv|only in casing"
        ),
        category="File Path Error",
        description="A file or module referenced by the build cannot be found.",
        severity="high",
        estimated_cost_minutes=1,
        common_causes=[
            "Import path casing differs from the file name (Linux builds are case-sensitive)",
            "File not committed to the repository",
            "Wrong publish or base directory",
        ],
        quick_fixes=[
            "Match import paths to the exact file name casing",
            "Commit the missing file",
            "Check base and publish directories",
        ],
        prevention_tips=["Build on a case-sensitive filesystem before pushing", "Lint import paths"],
    ),
    ErrorRule(
        pattern=r"out of memory|heap.*limit|javascript heap|enomem|exit code 137|signal: killed",
        category="Memory Limit",
        description="The build process ran out of memory.",
        severity="critical",
        estimated_cost_minutes=5,
        common_causes=["Large bundle size", "Memory-intensive build process"],
        quick_fixes=["Increase Node memory limit", "Optimize bundle splitting"],
        prevention_tips=["Bundle analysis", "Code splitting", "Image optimization"],
    ),
    ErrorRule(
        pattern=(
            r"failed to fetch|network error|timeout|timed out|etimedout|econnreset"
            r"|econnrefused|eai_again|getaddrinfo|socket hang up"
        ),
        category="Network Issue",
        description="A network request made during the build failed or timed out.",
        severity="medium",
        estimated_cost_minutes=3,
        common_causes=["External API unavailable", "DNS resolution issues", "CDN problems"],
        quick_fixes=["Retry build", "Check external service status", "Implement fallbacks"],
        prevention_tips=["Add retry logic", "Monitor external dependencies", "Use CDN alternatives"],
    ),
    ErrorRule(
        pattern=r"typescript.*error|ts\(\d+\)|\bts\d{4,5}\b|type error:",
        category="TypeScript Error",
        description="Type checking failed during the build.",
        severity="high",
        estimated_cost_minutes=2,
        common_causes=["Type definition issues", "Strict mode violations", "Missing type declarations"],
        quick_fixes=["Fix type annotations", "Update @types packages", "Add type assertions"],
        prevention_tips=["Enable strict TypeScript checking", "Regular type audits", "Use proper typing"],
    ),
    ErrorRule(
        pattern=(
            r"\bnext(\.js)?\b.*(build.*failed|error)|error occurred prerendering"
            r"|export encountered errors"
        ),
        category="Next.js Build Error",
        description="Next.js failed while building or pre-rendering pages.",
        severity="high",
        estimated_cost_minutes=3,
        common_causes=["Invalid Next.js configuration", "Build optimization issues", "Static generation errors"],
        quick_fixes=["Check next.config.js", "Update Next.js version", "Fix static props"],
        prevention_tips=["Test builds locally", "Monitor Next.js updates", "Validate configurations"],
    ),
    ErrorRule(
        pattern=(
            r"gatsby.*(failed|error)|hugo.*error|jekyll.*error|eleventy.*error"
            r"|astro.*error|vite.*(build failed|error)|nuxt.*error"
        ),
        category="Static Site Generator Error",
        description="The static site generator failed while producing the site.",
        severity="high",
        estimated_cost_minutes=3,
        common_causes=["Invalid generator configuration", "Broken content front matter", "Plugin incompatibility"],
        quick_fixes=["Run the generator build locally", "Check recently changed content files", "Pin plugin versions"],
        prevention_tips=["Validate content in CI", "Upgrade generator and plugins together"],
    ),
    ErrorRule(
        pattern=r"eslint.*error|lint(ing)?.*(failed|error)|prettier.*(failed|error)",
        category="Linting Error",
        description="Lint checks run as part of the build reported errors.",
        severity="medium",
        estimated_cost_minutes=1,
        common_causes=["Code style violations", "ESLint configuration issues", "Deprecated rules"],
        quick_fixes=["Fix linting errors", "Update ESLint config", "Disable problematic rules"],
        prevention_tips=["Pre-commit hooks", "IDE linting integration", "Regular rule updates"],
    ),
]
