import logging
import os

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# Raw column names seen in listings exports, first match wins
NEIGHBORHOOD_COLUMNS = ['neighbourhood_cleansed', 'neighborhood_cleansed', 'neighbourhood', 'neighborhood']

BOOLEAN_STRINGS = {'t': True, 'true': True, 'f': False, 'false': False}


def clean_price(value):
    """Parse a currency string such as '$1,250.00' into a float"""
    if pd.isna(value):
        return np.nan
    if isinstance(value, str):
        value = value.replace('$', '').replace(',', '').strip()
        if not value:
            return np.nan
    return float(value)


def parse_superhost(value):
    """Map 't'/'f' style flags to booleans, leaving unknowns as missing"""
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if pd.isna(value):
        return None
    return BOOLEAN_STRINGS.get(str(value).strip().lower())


class ListingDataPrep:
    """
    Data loading and preparation for the listings price analysis
    """

    def __init__(self, data_path='listings.csv', output_dir='output', max_price=None):
        """
        Initialize with data path and output directory

        Parameters:
        -----------
        data_path : str, default='listings.csv'
            CSV export of the listings
        output_dir : str, default='output'
            Directory for saving outputs
        max_price : float, optional
            Drop listings priced above this value
        """
        self.data_path = data_path
        self.output_dir = output_dir
        self.max_price = max_price
        self.df = None
        self.target = 'price'

        os.makedirs(output_dir, exist_ok=True)

        logger.info("Initialized listings data preparation")

    def load_data(self, df=None):
        """Load the dataset from file, or take a copy of df when given"""
        if df is not None:
            self.df = df.copy()
            logger.info(f"Using provided DataFrame with shape: {self.df.shape}")
            return self.df

        logger.info(f"Loading data from: {self.data_path}")
        self.df = pd.read_csv(self.data_path)
        logger.info(f"Dataset loaded successfully! Shape: {self.df.shape}")
        return self.df

    def prepare_data(self, save=True):
        """Clean the loaded listings and return the analysis-ready frame"""
        if self.df is None:
            raise ValueError("No data loaded. Run load_data() first.")

        logger.info(f"Original dataset: {self.df.shape[0]} rows, {self.df.shape[1]} columns")

        self._normalize_neighborhood()
        self._clean_price()
        self._coerce_numeric()
        self._coerce_superhost()
        self._filter_prices()

        if save:
            self._save_processed_data()

        return self.df

    def _normalize_neighborhood(self):
        """Rename the first neighborhood-like column to 'neighborhood'"""
        column = next((col for col in NEIGHBORHOOD_COLUMNS if col in self.df.columns), None)
        if column is None:
            logger.warning("No neighborhood column found")
            return
        if column != 'neighborhood':
            self.df = self.df.drop(columns=[c for c in ['neighborhood'] if c in self.df.columns])
            self.df = self.df.rename(columns={column: 'neighborhood'})
            logger.info(f"Using '{column}' as neighborhood")

    def _clean_price(self):
        if self.target not in self.df.columns:
            raise KeyError(f"Dataset has no '{self.target}' column")
        self.df[self.target] = self.df[self.target].apply(clean_price)

    def _coerce_numeric(self):
        for col in ['bedrooms', 'beds']:
            if col in self.df.columns:
                self.df[col] = pd.to_numeric(self.df[col], errors='coerce')

    def _coerce_superhost(self):
        if 'host_is_superhost' in self.df.columns:
            self.df['host_is_superhost'] = self.df['host_is_superhost'].map(parse_superhost)

    def _filter_prices(self):
        """Drop missing, non-positive and (optionally) too-expensive listings"""
        before = len(self.df)
        mask = self.df[self.target].notna() & (self.df[self.target] > 0)
        if self.max_price is not None:
            mask &= self.df[self.target] <= self.max_price
        self.df = self.df[mask].reset_index(drop=True)
        logger.info(f"Dropped {before - len(self.df)} listings without a usable price: {len(self.df)} rows")

    def _save_processed_data(self):
        output_path = os.path.join(self.output_dir, 'processed_listings.csv')
        self.df.to_csv(output_path, index=False)
        logger.info(f"Processed data saved to {output_path}")

    def get_data(self):
        """Return the prepared dataframe"""
        return self.df
