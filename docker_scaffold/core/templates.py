"""Template generation functions for container artifacts."""

import json
import re

from docker_scaffold.core.base_image import CONTAINER_PORT, BaseImage

CLRDBG_DIR = "/clrdbg"
CLRDBG_SCRIPT_URL = (
    "https://raw.githubusercontent.com/Microsoft/MIEngine/"
    + "getclrdbg-release/scripts/GetClrDbg.sh"
)
CLRDBG_VERSION = "VS2015U2"

_SERVICE_NAME_RE = re.compile(r"[^a-z0-9._-]+")


def service_name_for(image_name: str) -> str:
    """Compose service/project name derived from an image name."""
    return _SERVICE_NAME_RE.sub("-", image_name.lower()).strip("-.") or "app"


def _exec_form(args: list[str]) -> str:
    """Render a Dockerfile exec-form instruction argument."""
    return json.dumps(args)


# ---------------------------------------------------------------------------
# Dockerfiles
# ---------------------------------------------------------------------------


def get_dockerfile_debug_template(base_image: BaseImage) -> str:
    """Generate Dockerfile.debug content.

    Args:
        base_image: Selected base image

    Returns:
        Complete Dockerfile.debug content as string
    """
    lines = [f"FROM {base_image.reference}", ""]

    if base_image.supports_remote_debugging:
        lines += [
            "ENV NUGET_XMLDOC_MODE skip",
            "",
            "RUN apt-get update \\",
            "    && apt-get install -y --no-install-recommends unzip \\",
            "    && rm -rf /var/lib/apt/lists/* \\",
            f"    && curl -sSL {CLRDBG_SCRIPT_URL} "
            + f"| bash /dev/stdin -v {CLRDBG_VERSION} -l {CLRDBG_DIR}",
            "",
        ]

    lines += [
        "WORKDIR /app",
        "COPY project.json /app",
        f"RUN {_exec_form(base_image.restore_command)}",
        "COPY . /app",
    ]

    build = base_image.build_command("debug")
    if build is not None:
        lines.append(f"RUN {_exec_form(build)}")

    lines += ["", f"EXPOSE {CONTAINER_PORT}"]

    if base_image.supports_remote_debugging:
        run = " ".join(base_image.run_command("debug"))
        # Stay idle when a debugger will launch the app through docker exec
        script = f'if [ -z "$REMOTE_DEBUGGING" ]; then {run}; else sleep infinity; fi'
        lines.append(f"ENTRYPOINT {_exec_form(['/bin/bash', '-c', script])}")
    else:
        lines.append(f"ENTRYPOINT {_exec_form(base_image.run_command('debug'))}")

    return "\n".join(lines) + "\n"


def get_dockerfile_template(base_image: BaseImage) -> str:
    """Generate release Dockerfile content.

    Args:
        base_image: Selected base image

    Returns:
        Complete Dockerfile content as string
    """
    lines = [
        f"FROM {base_image.reference}",
        "",
        "WORKDIR /app",
        "COPY project.json /app",
        f"RUN {_exec_form(base_image.restore_command)}",
        "COPY . /app",
    ]

    build = base_image.build_command("release")
    if build is not None:
        lines.append(f"RUN {_exec_form(build)}")

    lines += [
        "",
        f"EXPOSE {CONTAINER_PORT}",
        f"ENTRYPOINT {_exec_form(base_image.run_command('release'))}",
    ]
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Compose files
# ---------------------------------------------------------------------------


def get_docker_compose_template(
    image_name: str,
    port: int,
    base_image: BaseImage,
    environment: str,
) -> str:
    """Generate docker-compose.yml / docker-compose.debug.yml content.

    Args:
        image_name: Name of the image built by the compose file
        port: Host port published for the container
        base_image: Selected base image
        environment: 'debug' or 'release'

    Returns:
        Complete compose file content as string
    """
    service = service_name_for(image_name)
    is_debug = environment == "debug"
    tag = f"{image_name}:debug" if is_debug else image_name
    dockerfile = "Dockerfile.debug" if is_debug else "Dockerfile"

    content = f"""version: '2'

services:
  {service}:
    image: {tag}
    build:
      context: .
      dockerfile: {dockerfile}
    ports:
      - "{port}:{CONTAINER_PORT}"
"""

    if is_debug and base_image.supports_remote_debugging:
        content += """    environment:
      - REMOTE_DEBUGGING
"""

    content += f"""    labels:
      com.{service}.environment: "{environment}"
"""
    return content


# ---------------------------------------------------------------------------
# Task scripts
# ---------------------------------------------------------------------------

_SH_FUNCTIONS = """
# Sets composeFileName for the chosen environment.
setComposeFileName () {
  if [[ -z $ENVIRONMENT ]]; then
    ENVIRONMENT="debug"
  fi

  composeFileName="docker-compose.yml"
  if [[ $ENVIRONMENT != "release" ]]; then
    composeFileName="docker-compose.$ENVIRONMENT.yml"
  fi
}

# Kills all containers of the compose project and removes their images.
cleanAll () {
  setComposeFileName

  if [[ ! -f $composeFileName ]]; then
    echo "$ENVIRONMENT is not a valid parameter. File '$composeFileName' does not exist."
  else
    docker-compose -f $composeFileName -p $projectName down --rmi all

    # Remove any dangling images (from previous builds)
    danglingImages=$(docker images -q --filter 'dangling=true')
    if [[ ! -z $danglingImages ]]; then
      docker rmi -f $danglingImages
    fi
  fi
}

# Builds the Docker image.
buildImage () {
  setComposeFileName

  if [[ ! -f $composeFileName ]]; then
    echo "$ENVIRONMENT is not a valid parameter. File '$composeFileName' does not exist."
  else
    echo "Building the image $imageName ($ENVIRONMENT)."
    docker-compose -f $composeFileName -p $projectName build
  fi
}

# Runs docker-compose.
compose () {
  setComposeFileName

  if [[ ! -f $composeFileName ]]; then
    echo "$ENVIRONMENT is not a valid parameter. File '$composeFileName' does not exist."
  else
    echo "Running compose file $composeFileName"
    docker-compose -f $composeFileName -p $projectName kill
    docker-compose -f $composeFileName -p $projectName up -d
  fi
}
"""

_SH_DEBUGGING = """
# Attaches clrdbg to the running debug container.
startDebugging () {
  containerId=$(docker ps -f "name=$projectName" -q -n=1)
  if [[ -z $containerId ]]; then
    echo "Could not find a container named $projectName"
  else
    docker exec -i $containerId /clrdbg/clrdbg --interpreter=mi
  fi
}
"""

_SH_OPEN_SITE = """
# Waits for the site to answer, then opens it in the browser.
openSite () {
  printf 'Opening site'
  until $(curl --output /dev/null --silent --head --fail $url); do
    printf '.'
    sleep 1
  done
  echo

  if command -v xdg-open > /dev/null; then
    xdg-open $url
  else
    open $url
  fi
}
"""


def get_docker_task_sh_template(
    image_name: str,
    port: int,
    base_image: BaseImage,
    is_web_project: bool = True,
) -> str:
    """Generate dockerTask.sh content.

    Args:
        image_name: Name of the image built by the compose files
        port: Host port published for the container
        base_image: Selected base image
        is_web_project: Whether 'compose' opens the site afterwards

    Returns:
        Complete bash script content as string
    """
    debugging = base_image.supports_remote_debugging

    content = f"""#!/bin/bash
imageName="{image_name}"
projectName="{service_name_for(image_name)}"
publicPort={port}
url="http://localhost:$publicPort"
isWebProject={'true' if is_web_project else 'false'}
"""
    content += _SH_FUNCTIONS
    if debugging:
        content += _SH_DEBUGGING
    content += _SH_OPEN_SITE
    content += """
# Shows the usage for the script.
showUsage () {
  echo "Usage: dockerTask.sh [COMMAND] (ENVIRONMENT)"
  echo "    Runs build or compose using specific environment (if not provided, debug environment is used)"
  echo ""
  echo "Commands:"
  echo "    build: Builds a Docker image ('$imageName')."
  echo "    compose: Runs docker-compose."
  echo "    clean: Removes the image '$imageName' and kills all containers based on that image."
  echo ""
  echo "Environments:"
  echo "    debug: Uses debug environment."
  echo "    release: Uses release environment."
  echo ""
  echo "Example:"
  echo "    ./dockerTask.sh build debug"
  echo ""
  echo "    This will:"
  echo "        Build a Docker image named $imageName using debug environment."
}

if [ $# -eq 0 ]; then
  showUsage
else
  case "$1" in
    "compose")
      ENVIRONMENT=$(echo $2 | tr "[:upper:]" "[:lower:]")
      compose
      if [[ $isWebProject = true ]]; then
        openSite
      fi
      ;;
"""
    if debugging:
        content += """    "composeForDebug")
      ENVIRONMENT="debug"
      export REMOTE_DEBUGGING=1
      compose
      ;;
    "startDebugging")
      startDebugging
      ;;
"""
    content += """    "build")
      ENVIRONMENT=$(echo $2 | tr "[:upper:]" "[:lower:]")
      buildImage
      ;;
    "clean")
      ENVIRONMENT=$(echo $2 | tr "[:upper:]" "[:lower:]")
      cleanAll
      ;;
    *)
      showUsage
      ;;
  esac
fi
"""
    return content


_PS1_FUNCTIONS = """
# Returns the compose file for the chosen environment.
function GetComposeFileName () {
    if ($Environment -eq "release") {
        "docker-compose.yml"
    }
    else {
        "docker-compose.$Environment.yml"
    }
}

# Kills all containers of the compose project and removes their images.
function CleanAll () {
    $composeFileName = GetComposeFileName
    if (Test-Path $composeFileName) {
        docker-compose -f $composeFileName -p $projectName down --rmi all

        # Remove any dangling images (from previous builds)
        $danglingImages = $(docker images -q --filter 'dangling=true')
        if (-not [String]::IsNullOrWhiteSpace($danglingImages)) {
            docker rmi -f $danglingImages
        }
    }
    else {
        Write-Error -Message "$Environment is not a valid parameter. File '$composeFileName' does not exist." -Category InvalidArgument
    }
}

# Builds the Docker image.
function BuildImage () {
    $composeFileName = GetComposeFileName
    if (Test-Path $composeFileName) {
        Write-Host "Building the image $imageName ($Environment)."
        docker-compose -f $composeFileName -p $projectName build
    }
    else {
        Write-Error -Message "$Environment is not a valid parameter. File '$composeFileName' does not exist." -Category InvalidArgument
    }
}

# Runs docker-compose.
function Compose () {
    $composeFileName = GetComposeFileName
    if (Test-Path $composeFileName) {
        Write-Host "Running compose file $composeFileName"
        docker-compose -f $composeFileName -p $projectName kill
        docker-compose -f $composeFileName -p $projectName up -d
    }
    else {
        Write-Error -Message "$Environment is not a valid parameter. File '$composeFileName' does not exist." -Category InvalidArgument
    }
}
"""

_PS1_DEBUGGING = """
# Attaches clrdbg to the running debug container.
function StartDebugging () {
    $containerId = (docker ps -f "name=$projectName" -q -n=1)
    if ([System.String]::IsNullOrWhiteSpace($containerId)) {
        Write-Error "Could not find a container named $projectName"
    }
    else {
        docker exec -i $containerId /clrdbg/clrdbg --interpreter=mi
    }
}
"""

_PS1_OPEN_SITE = """
# Waits for the site to answer, then opens it in the browser.
function OpenSite () {
    Write-Host "Opening site" -NoNewline
    $status = 0

    while ($status -ne 200) {
        try {
            $response = Invoke-WebRequest -Uri $url -Headers @{"Cache-Control"="no-cache";"Pragma"="no-cache"} -UseBasicParsing
            $status = [int]$response.StatusCode
        }
        catch [System.Net.WebException] { }
        if ($status -ne 200) {
            Write-Host "." -NoNewline
            Start-Sleep 1
        }
    }

    Write-Host
    Start-Process $url
}
"""


def get_docker_task_ps1_template(
    image_name: str,
    port: int,
    base_image: BaseImage,
    is_web_project: bool = True,
) -> str:
    """Generate dockerTask.ps1 content.

    Args:
        image_name: Name of the image built by the compose files
        port: Host port published for the container
        base_image: Selected base image
        is_web_project: Whether 'compose' opens the site afterwards

    Returns:
        Complete PowerShell script content as string
    """
    debugging = base_image.supports_remote_debugging
    commands = ['"build"', '"compose"', '"clean"']
    if debugging:
        commands = ['"build"', '"compose"', '"composeForDebug"', '"startDebugging"', '"clean"']

    content = f"""<#
.SYNOPSIS
Builds and runs the {image_name} Docker image.
.PARAMETER Command
One of: {', '.join(c.strip('"') for c in commands)}.
.PARAMETER Environment
The environment to build for (debug or release). Defaults to debug.
.EXAMPLE
C:\\PS> .\\dockerTask.ps1 build debug
#>

Param(
    [Parameter(Position = 0)]
    [ValidateSet({', '.join(commands)})]
    [String]$Command,
    [Parameter(Position = 1)]
    [ValidateNotNullOrEmpty()]
    [String]$Environment = "debug"
)

$imageName="{image_name}"
$projectName="{service_name_for(image_name)}"
$publicPort={port}
$url="http://localhost:$publicPort"
$isWebProject=${'true' if is_web_project else 'false'}
"""
    content += _PS1_FUNCTIONS
    if debugging:
        content += _PS1_DEBUGGING
    content += _PS1_OPEN_SITE
    content += """
# Shows the usage for the script.
function ShowUsage () {
    Write-Host "Usage: dockerTask.ps1 [COMMAND] (ENVIRONMENT)"
    Write-Host "    Runs build or compose using specific environment (if not provided, debug environment is used)"
    Write-Host ""
    Write-Host "Commands:"
    Write-Host "    build: Builds a Docker image ('$imageName')."
    Write-Host "    compose: Runs docker-compose."
    Write-Host "    clean: Removes the image '$imageName' and kills all containers based on that image."
    Write-Host ""
    Write-Host "Environments:"
    Write-Host "    debug: Uses debug environment."
    Write-Host "    release: Uses release environment."
}

$Environment = $Environment.ToLowerInvariant()

switch ($Command) {
    "build" { BuildImage }
    "compose" {
        Compose
        if ($isWebProject) {
            OpenSite
        }
    }
"""
    if debugging:
        content += """    "composeForDebug" {
        $Environment = "debug"
        $env:REMOTE_DEBUGGING = 1
        Compose
    }
    "startDebugging" { StartDebugging }
"""
    content += """    "clean" { CleanAll }
    default { ShowUsage }
}
"""
    return content
