"""
HexaStone Connect6 Engine

A Connect6 engine (19*19 board, six in a row wins, two stones per turn
after Black's single-stone opening) built on Monte-Carlo Tree Search with
a chain-based static evaluator.

## Architecture

The engine is organized into several key modules:

1. **board**: Board representation
   - numpy grid, move application and validation
   - Win detection through precomputed six-cell windows

2. **evaluation**: Position evaluation functions
   - Abstract Evaluator interface (swappable design)
   - ChainEvaluator: open/blocked chain-length weights

3. **search**: Search algorithms
   - Locality-pruned candidate generation and forced-move detection
   - Time-bounded MCTS with turn-phase aware rollouts
   - Optional transposition table with Zobrist hashing

4. **game**: Terminal front end
   - Board rendering and human input validation
   - Human-versus-engine game loop

5. **utils**: Testing and benchmarking utilities
   - Tactical win/block test suite
   - Engine-versus-engine self-play

## Quick Start

### As a Python Library

```python
from connect6_engine.board import BoardState, BLACK, WHITE, Move, Position
from connect6_engine.search import find_best_move

board = BoardState()
board.apply_move(Move(Position(9, 9)), BLACK)

move = find_best_move(board, WHITE, time_limit=2.0)
print(f"Best move: {move}")
```

### In the Terminal

```bash
hexastone --color white --time 4
```

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from connect6_engine.board import BoardState, Move, Position
from connect6_engine.evaluation import ChainEvaluator, Evaluator
from connect6_engine.search import MCTSEngine, SearchConfig, find_best_move

__all__ = [
    'BoardState',
    'Move',
    'Position',
    'Evaluator',
    'ChainEvaluator',
    'MCTSEngine',
    'SearchConfig',
    'find_best_move',
]
