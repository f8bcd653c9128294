# src/propflow/core/__init__.py
"""
Core do PropFlow.

Componentes principais:
    - pipeline     → modelo de contrato (Steps, garantias, sequência)
    - engine       → planejamento e execução sequencial
    - config       → resolução de configuração (merge, hashing, settings)
    - traceability → Event Log em memória de cada run

Limites explícitos:
    - Não contém lógica de negócio de Steps
    - Não possui CLI, serialização ou persistência
"""
