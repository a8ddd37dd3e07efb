import logging
from typing import List, Sequence, Tuple

from mdcraft.features.registry import Feature, FeatureState, FeatureType

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ('javascript', 'typescript', 'go', 'python', 'java', 'cpp', 'rust', 'csharp')
VOID = 'void'

Param = Tuple[str, str]  # (name, type)


def _indented(body: str, indent: str) -> List[str]:
    lines = [indent + '// Your code here']
    if body:
        lines += [indent + line if line else line for line in body.split('\n')]
    return lines


def _braced(signature: str, body: str, indent: str, brace_on_own_line: bool = False) -> str:
    lines = [signature, '{'] if brace_on_own_line else [signature + ' {']
    lines += _indented(body, indent)
    lines.append('}')
    return '\n'.join(lines)


def generate_function_stub(language: str, name: str = 'myFunction', params: Sequence[Param] = (('param1', 'string'),),
                           return_type: str = VOID, body: str = '') -> str:
    """
    Fenced function skeleton in one of SUPPORTED_LANGUAGES.

    `params` are (name, type) pairs; dynamically typed languages ignore the types.
    """
    if language not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language '{language}'. Expected one of {list(SUPPORTED_LANGUAGES)}")

    names = ', '.join(p[0] for p in params)
    name_colon_type = ', '.join(f'{p[0]}: {p[1]}' for p in params)
    type_then_name = ', '.join(f'{p[1]} {p[0]}' for p in params)
    name_then_type = ', '.join(f'{p[0]} {p[1]}' for p in params)

    if language == 'javascript':
        code = _braced(f'function {name}({names})', body, '  ')
    elif language == 'typescript':
        code = _braced(f'function {name}({name_colon_type}): {return_type}', body, '  ')
    elif language == 'go':
        go_return = '' if return_type == VOID else f' {return_type}'
        code = _braced(f'func {name}({name_then_type}){go_return}', body, '  ')
    elif language == 'python':
        lines = [f'def {name}({names}):', '    # Your code here']
        lines += ['    ' + line if line else line for line in body.split('\n')] if body else ['    pass']
        code = '\n'.join(lines)
    elif language == 'java':
        code = _braced(f'public {return_type} {name}({type_then_name})', body, '    ')
    elif language == 'cpp':
        code = _braced(f'{return_type} {name}({type_then_name})', body, '    ')
    elif language == 'rust':
        rust_return = '' if return_type == VOID else f' -> {return_type}'
        code = _braced(f'fn {name}({name_colon_type}){rust_return}', body, '    ')
    else:
        code = _braced(f'public {return_type} {name}({type_then_name})', body, '    ', brace_on_own_line=True)

    logger.debug(f"Generated {language} stub for {name}")
    return f'```{language}\n{code}\n```'


def get_features():
    return [
        Feature("GEN_CODE_STUB", generate_function_stub, FeatureState.STANDARD, FeatureType.GENERATOR, meta={'alias': 'stub'}),
    ]
